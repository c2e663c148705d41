"""Collapse comment use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.error import TargetNotFound
from forum.domain.service import CommentService
from forum.domain.value import CommentId, PostId, UserId

from .create_comment import CommentResponse, to_comment_response


class CollapseCommentRequest(BaseModel):
    """Collapse comment request."""

    post_id: str  # UUID string
    comment_id: str  # UUID string
    moderator_id: str  # User ID from the identity header
    collapsed: bool = True


class CollapseCommentUseCase(BaseUseCase):
    """Use case for a moderator folding (or unfolding) a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: CollapseCommentRequest) -> CommentResponse:
        """Execute collapse comment flow.

        Raises:
            TargetNotFound: If the comment isn't on the given post
            NotAuthorizedError: If the user doesn't moderate the community
        """
        comment_id = CommentId(UUID(request.comment_id))
        comment = await self.comment_service.get_comment_by_id(comment_id)
        if not comment or comment.post_id != PostId(UUID(request.post_id)):
            raise TargetNotFound("Comment", request.comment_id)

        updated = await self.comment_service.collapse_comment(
            comment_id=comment_id,
            moderator_id=UserId(UUID(request.moderator_id)),
            collapsed=request.collapsed,
        )
        return to_comment_response(updated)
