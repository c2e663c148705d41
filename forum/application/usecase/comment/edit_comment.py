"""Edit comment use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.error import TargetNotFound
from forum.domain.service import CommentService
from forum.domain.value import CommentId, PostId, UserId

from .create_comment import CommentResponse, to_comment_response


class EditCommentRequest(BaseModel):
    """Edit comment request."""

    post_id: str  # UUID string
    comment_id: str  # UUID string
    user_id: str  # User ID from the identity header
    content: str


class EditCommentUseCase(BaseUseCase):
    """Use case for editing a comment's content."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize edit comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: EditCommentRequest) -> CommentResponse:
        """Execute edit comment flow.

        Raises:
            TargetNotFound: If the comment isn't on the given post
            NotAuthorizedError: If the user isn't the author
            ContentDeletedException: If the comment is deleted
        """
        comment_id = CommentId(UUID(request.comment_id))
        comment = await self.comment_service.get_comment_by_id(comment_id)
        if not comment or comment.post_id != PostId(UUID(request.post_id)):
            raise TargetNotFound("Comment", request.comment_id)

        updated = await self.comment_service.edit_comment(
            comment_id=comment_id,
            user_id=UserId(UUID(request.user_id)),
            content=request.content,
        )
        return to_comment_response(updated)
