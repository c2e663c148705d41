"""Update user profile use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import UserService
from forum.domain.value import UserId


class UpdateUserProfileRequest(BaseModel):
    """Update user profile request."""

    user_id: str  # From the identity header
    display_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=500)


class UpdateUserProfileResponse(BaseModel):
    """Update user profile response."""

    user_id: str
    username: str
    display_name: str | None
    bio: str | None
    total_karma: int
    updated_at: datetime


class UpdateUserProfileUseCase(BaseUseCase):
    """Use case for updating a user's profile.

    Users can update their display name and bio. Username and karma
    cannot be changed through this endpoint.
    """

    def __init__(self, user_service: UserService) -> None:
        """Initialize update user profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(
        self, request: UpdateUserProfileRequest
    ) -> UpdateUserProfileResponse:
        """Execute update user profile flow.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.user_service.update_profile(
            user_id=UserId(UUID(request.user_id)),
            display_name=request.display_name,
            bio=request.bio,
        )

        return UpdateUserProfileResponse(
            user_id=str(user.id),
            username=user.username.root,
            display_name=user.display_name,
            bio=user.bio,
            total_karma=user.karma.total,
            updated_at=user.updated_at,
        )
