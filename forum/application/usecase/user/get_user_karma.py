"""Get user karma use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import UserService
from forum.domain.value import UserId


class GetUserKarmaRequest(BaseModel):
    """Get user karma request."""

    user_id: str  # UUID string


class GetUserKarmaResponse(BaseModel):
    """Karma breakdown of a user."""

    user_id: str
    post_karma: int
    comment_karma: int
    total_karma: int
    post_count: int
    comment_count: int


class GetUserKarmaUseCase(BaseUseCase):
    """Use case for reading a user's karma."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get user karma use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetUserKarmaRequest) -> GetUserKarmaResponse:
        """Execute get karma flow.

        Raises:
            NotFoundError: If user not found
        """
        summary = await self.user_service.get_user_karma(UserId(UUID(request.user_id)))

        return GetUserKarmaResponse(
            user_id=str(summary.user_id),
            post_karma=summary.post_karma,
            comment_karma=summary.comment_karma,
            total_karma=summary.total_karma,
            post_count=summary.post_count,
            comment_count=summary.comment_count,
        )
