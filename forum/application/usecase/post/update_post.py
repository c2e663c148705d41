"""Update post use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import PostService
from forum.domain.value import PostId, UserId

from .create_post import PostResponse, to_post_response


class UpdatePostRequest(BaseModel):
    """Update post request. Fields left as None keep their current value."""

    post_id: str  # UUID string
    user_id: str  # Current user ID (must be author)
    title: str | None = Field(default=None, min_length=3, max_length=300)
    content: str | None = Field(default=None, max_length=40000)
    nsfw: bool | None = None
    spoiler: bool | None = None


class UpdatePostUseCase(BaseUseCase):
    """Use case for editing a post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: UpdatePostRequest) -> PostResponse:
        """Execute update post flow.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user isn't the author
            ContentDeletedException: If the post is deleted
        """
        post = await self.post_service.update_post(
            post_id=PostId(UUID(request.post_id)),
            user_id=UserId(UUID(request.user_id)),
            title=request.title,
            content=request.content,
            nsfw=request.nsfw,
            spoiler=request.spoiler,
        )
        return to_post_response(post)
