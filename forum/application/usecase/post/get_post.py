"""Get post use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import PostService, VoteService
from forum.domain.value import PostId, UserId, VotableType

from .create_post import PostResponse, to_post_response


class GetPostRequest(BaseModel):
    """Get post request."""

    post_id: str  # UUID string
    viewer_id: str | None = None  # Optional, to include the viewer's vote


class GetPostUseCase(BaseUseCase):
    """Use case for reading one post."""

    def __init__(self, post_service: PostService, vote_service: VoteService) -> None:
        """Initialize get post use case.

        Args:
            post_service: Post domain service
            vote_service: Vote service for the viewer's vote
        """
        self.post_service = post_service
        self.vote_service = vote_service

    async def execute(self, request: GetPostRequest) -> PostResponse:
        """Execute get post flow.

        Deleted posts are still returned, flagged ``deleted``.

        Raises:
            TargetNotFound: If the post doesn't exist
        """
        post = await self.post_service.get_post_by_id(PostId(UUID(request.post_id)))

        user_vote = None
        if request.viewer_id:
            votes = await self.vote_service.get_user_votes(
                voter_id=UserId(UUID(request.viewer_id)),
                target_type=VotableType.POST,
                target_ids=[post.id],
            )
            user_vote = votes.get(post.id)

        return to_post_response(post, user_vote)
