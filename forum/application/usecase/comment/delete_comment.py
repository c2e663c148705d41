"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.error import TargetNotFound
from forum.domain.service import CommentService
from forum.domain.value import CommentId, PostId, UserId

from .create_comment import CommentResponse, to_comment_response


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    post_id: str  # UUID string
    comment_id: str  # UUID string
    user_id: str  # User ID from the identity header


class DeleteCommentUseCase(BaseUseCase):
    """Use case for soft-deleting a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> CommentResponse:
        """Execute delete comment flow. Deleting twice is a no-op.

        Raises:
            TargetNotFound: If the comment isn't on the given post
            NotAuthorizedError: If the user isn't the author
        """
        comment_id = CommentId(UUID(request.comment_id))
        comment = await self.comment_service.get_comment_by_id(comment_id)
        if not comment or comment.post_id != PostId(UUID(request.post_id)):
            raise TargetNotFound("Comment", request.comment_id)

        deleted = await self.comment_service.delete_comment(
            comment_id=comment_id, user_id=UserId(UUID(request.user_id))
        )
        return to_comment_response(deleted)
