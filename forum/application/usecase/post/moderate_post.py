"""Moderate post use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import PostService
from forum.domain.value import PostId, UserId

from .create_post import PostResponse, to_post_response


class ModeratePostRequest(BaseModel):
    """Lock/pin request. Flags left as None keep their current value."""

    post_id: str  # UUID string
    moderator_id: str  # User ID from the identity header
    locked: bool | None = None
    pinned: bool | None = None


class ModeratePostUseCase(BaseUseCase):
    """Use case for a community moderator locking or pinning a post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: ModeratePostRequest) -> PostResponse:
        """Execute moderation.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user doesn't moderate the community
        """
        post = await self.post_service.moderate_post(
            post_id=PostId(UUID(request.post_id)),
            moderator_id=UserId(UUID(request.moderator_id)),
            locked=request.locked,
            pinned=request.pinned,
        )
        return to_post_response(post)
