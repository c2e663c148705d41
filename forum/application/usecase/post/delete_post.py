"""Delete post use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import PostService
from forum.domain.value import PostId, UserId

from .create_post import PostResponse, to_post_response


class DeletePostRequest(BaseModel):
    """Delete post request."""

    post_id: str  # UUID string
    user_id: str  # User ID from the identity header


class DeletePostUseCase(BaseUseCase):
    """Use case for soft-deleting a post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: DeletePostRequest) -> PostResponse:
        """Execute delete post flow.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user isn't the author
        """
        post = await self.post_service.delete_post(
            post_id=PostId(UUID(request.post_id)),
            user_id=UserId(UUID(request.user_id)),
        )
        return to_post_response(post)
