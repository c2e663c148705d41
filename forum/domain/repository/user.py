"""User repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.user import User
from forum.domain.value import UserId, Username, VotableType


class UserRepository(ABC):
    """Repository for User aggregate."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The stored user

        Raises:
            AlreadyExistsError: If the username is taken
        """
        pass

    @abstractmethod
    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str],
        bio: Optional[str],
        at: datetime,
    ) -> Optional[User]:
        """Replace the user-editable profile fields.

        Returns:
            The updated user, or None if it doesn't exist
        """
        pass

    @abstractmethod
    async def apply_karma_delta(
        self, user_id: UserId, target_type: VotableType, delta: int
    ) -> None:
        """Atomically add ``delta`` to the post or comment karma and the total.

        Args:
            user_id: Author receiving the karma
            target_type: Selects the post or comment karma bucket
            delta: Signed change (-2..2)
        """
        pass
