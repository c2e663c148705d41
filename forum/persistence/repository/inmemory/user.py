"""In-memory user repository for testing."""

from datetime import datetime
from typing import Optional

from forum.domain.error import AlreadyExistsError
from forum.domain.model.user import User
from forum.domain.repository.user import UserRepository
from forum.domain.value import Karma, UserId, Username, VotableType

from .store import InMemoryStore


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self.store.users.get(user_id)

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        for user in self.store.users.values():
            if user.username == username:
                return user
        return None

    async def create(self, user: User) -> User:
        """Insert a new user.

        Raises:
            AlreadyExistsError: If the username is taken
        """
        if await self.find_by_username(user.username):
            raise AlreadyExistsError("User", "username", user.username.root)

        stored = user.model_copy(update={"karma": Karma()})
        self.store.users[user.id] = stored
        return stored

    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str],
        bio: Optional[str],
        at: datetime,
    ) -> Optional[User]:
        """Replace the user-editable profile fields."""
        user = self.store.users.get(user_id)
        if user is None:
            return None

        updated = user.model_copy(
            update={"display_name": display_name, "bio": bio, "updated_at": at}
        )
        self.store.users[user_id] = updated
        return updated

    async def apply_karma_delta(
        self, user_id: UserId, target_type: VotableType, delta: int
    ) -> None:
        """Add ``delta`` to one karma bucket and the total."""
        user = self.store.users.get(user_id)
        if user is None:
            return

        karma = user.karma
        if target_type == VotableType.POST:
            karma = karma.model_copy(update={"post": karma.post + delta})
        else:
            karma = karma.model_copy(update={"comment": karma.comment + delta})
        karma = karma.model_copy(update={"total": karma.total + delta})
        self.store.users[user_id] = user.model_copy(update={"karma": karma})
