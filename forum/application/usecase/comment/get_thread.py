"""Get thread use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import CommentService, PostService, VoteService
from forum.domain.value import (
    CommentId,
    PostId,
    ThreadSortOrder,
    UserId,
    VotableType,
)

from .create_comment import CommentResponse, to_comment_response


class ThreadItem(CommentResponse):
    """Comment in a thread listing."""

    child_count: int
    user_vote: int | None = None


class GetThreadRequest(BaseModel):
    """Get thread request."""

    post_id: str  # UUID string
    sort: ThreadSortOrder = ThreadSortOrder.BEST
    limit: int | None = None
    root_comment_id: str | None = None  # Only this comment and its replies
    viewer_id: str | None = None  # Optional, to include the viewer's votes


class GetThreadResponse(BaseModel):
    """Get thread response."""

    post_id: str
    comments: list[ThreadItem]
    total: int


class GetThreadUseCase(BaseUseCase):
    """Use case for reading a post's comment thread."""

    def __init__(
        self,
        comment_service: CommentService,
        post_service: PostService,
        vote_service: VoteService,
    ) -> None:
        """Initialize get thread use case.

        Args:
            comment_service: Comment domain service
            post_service: Post domain service
            vote_service: Vote service for the viewer's votes
        """
        self.comment_service = comment_service
        self.post_service = post_service
        self.vote_service = vote_service

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Raises:
            TargetNotFound: If the post or root comment doesn't exist
            ValidationError: If limit is out of range
        """
        post_id = PostId(UUID(request.post_id))
        await self.post_service.get_post_by_id(post_id)

        thread = await self.comment_service.get_thread(
            post_id=post_id,
            sort=request.sort,
            limit=request.limit,
            root_comment_id=(
                CommentId(UUID(request.root_comment_id))
                if request.root_comment_id
                else None
            ),
        )

        # Batch query for the viewer's votes
        user_votes = {}
        if request.viewer_id and thread:
            user_votes = await self.vote_service.get_user_votes(
                voter_id=UserId(UUID(request.viewer_id)),
                target_type=VotableType.COMMENT,
                target_ids=[item.comment.id for item in thread],
            )

        items = []
        for item in thread:
            vote = user_votes.get(item.comment.id)
            items.append(
                ThreadItem(
                    **to_comment_response(item.comment).model_dump(),
                    child_count=item.child_count,
                    user_vote=int(vote) if vote is not None else None,
                )
            )

        return GetThreadResponse(
            post_id=request.post_id, comments=items, total=len(items)
        )
