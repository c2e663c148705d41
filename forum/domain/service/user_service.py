"""User domain service."""

from dataclasses import dataclass

import logfire

from forum.domain.error import AlreadyExistsError, NotFoundError, ValidationError
from forum.domain.model import User
from forum.domain.model.common import utc_now
from forum.domain.repository import CommentRepository, PostRepository, UserRepository
from forum.domain.value import UserId, Username

from .base import Service


@dataclass
class KarmaSummary:
    """A user's karma alongside how much content earned it."""

    user_id: UserId
    post_karma: int
    comment_karma: int
    total_karma: int
    post_count: int
    comment_count: int


class UserService(Service):
    """Domain service for user operations."""

    def __init__(
        self,
        user_repository: UserRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            post_repository: Post repository (for content counts)
            comment_repository: Comment repository (for content counts)
        """
        self.user_repository = user_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            logfire.info("User found", user_id=str(user_id), username=user.username.root)
            return user

    async def register_user(
        self,
        user_id: UserId,
        username: Username,
        display_name: str | None = None,
    ) -> tuple[User, bool]:
        """Create the user row on first sign-in.

        The ID comes from the upstream identity provider. Registering an ID
        that already exists returns the stored user unchanged.

        Returns:
            The user, and whether it was created by this call

        Raises:
            AlreadyExistsError: If another user holds the username
        """
        with logfire.span(
            "user_service.register_user",
            user_id=str(user_id),
            username=username.root,
        ):
            existing = await self.user_repository.find_by_id(user_id)
            if existing:
                logfire.info("User already registered", user_id=str(user_id))
                return existing, False

            if await self.user_repository.find_by_username(username):
                logfire.warn("Username taken", username=username.root)
                raise AlreadyExistsError("User", "username", username.root)

            now = utc_now()
            user = await self.user_repository.create(
                User(
                    id=user_id,
                    username=username,
                    display_name=display_name,
                    created_at=now,
                    updated_at=now,
                )
            )
            logfire.info("User registered", user_id=str(user_id), username=username.root)
            return user, True

    async def update_profile(
        self,
        user_id: UserId,
        display_name: str | None = None,
        bio: str | None = None,
    ) -> User:
        """Update a user's display name and bio.

        None keeps the current value and an empty string clears it.
        Username and karma are not editable.

        Raises:
            NotFoundError: If user not found
            ValidationError: If a field is too long
        """
        if display_name is not None and len(display_name) > 100:
            raise ValidationError("display_name must be at most 100 characters")
        if bio is not None and len(bio) > 500:
            raise ValidationError("bio must be at most 500 characters")

        with logfire.span("user_service.update_profile", user_id=str(user_id)):
            user = await self.get_by_id(user_id)
            if display_name is not None:
                user_display_name = display_name or None
            else:
                user_display_name = user.display_name
            user_bio = (bio or None) if bio is not None else user.bio

            updated = await self.user_repository.update_profile(
                user_id, display_name=user_display_name, bio=user_bio, at=utc_now()
            )
            if updated is None:
                raise NotFoundError("User", str(user_id))

            logfire.info("User profile updated", user_id=str(user_id))
            return updated

    async def get_user_karma(self, user_id: UserId) -> KarmaSummary:
        """Get a user's karma breakdown and live content counts.

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_user_karma", user_id=str(user_id)):
            user = await self.get_by_id(user_id)
            post_count = await self.post_repository.count_by_author(user_id)
            comment_count = await self.comment_repository.count_by_author(user_id)

            return KarmaSummary(
                user_id=user_id,
                post_karma=user.karma.post,
                comment_karma=user.karma.comment,
                total_karma=user.karma.total,
                post_count=post_count,
                comment_count=comment_count,
            )
