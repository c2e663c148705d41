"""PostgreSQL implementation of User repository."""

from datetime import datetime
from typing import Optional

import logfire
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.error import AlreadyExistsError
from forum.domain.model import User
from forum.domain.repository import UserRepository
from forum.domain.value import UserId, Username, VotableType
from forum.persistence.mappers import row_to_user, user_to_dict
from forum.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_user(row._asdict()) if row else None

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        stmt = select(users_table).where(users_table.c.username == username.root)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_user(row._asdict()) if row else None

    async def create(self, user: User) -> User:
        """Insert a new user."""
        with logfire.span(
            "user_repository.create", user_id=str(user.id), username=user.username.root
        ):
            if await self.find_by_username(user.username):
                raise AlreadyExistsError("User", "username", user.username.root)

            stmt = (
                users_table.insert()
                .values(**user_to_dict(user))
                .returning(users_table)
            )
            try:
                result = await self.session.execute(stmt)
            except IntegrityError as e:
                # Lost a race with a concurrent registration
                raise AlreadyExistsError(
                    "User", "username", user.username.root
                ) from e

            row = result.fetchone()
            await self.session.flush()
            logfire.info("User inserted", user_id=str(user.id))
            return row_to_user(row._asdict())

    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str],
        bio: Optional[str],
        at: datetime,
    ) -> Optional[User]:
        """Replace the user-editable profile fields."""
        with logfire.span("user_repository.update_profile", user_id=str(user_id)):
            stmt = (
                users_table.update()
                .where(users_table.c.id == user_id)
                .values(display_name=display_name, bio=bio, updated_at=at)
                .returning(users_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()
            return row_to_user(row._asdict()) if row else None

    async def apply_karma_delta(
        self, user_id: UserId, target_type: VotableType, delta: int
    ) -> None:
        """Atomically add ``delta`` to one karma bucket and the total."""
        column = (
            users_table.c.post_karma
            if target_type == VotableType.POST
            else users_table.c.comment_karma
        )
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(
                {
                    column: column + delta,
                    users_table.c.total_karma: users_table.c.total_karma + delta,
                }
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
