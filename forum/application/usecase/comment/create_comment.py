"""Create comment use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.model import Comment
from forum.domain.service import CommentService, UserService
from forum.domain.value import CommentId, PostId, UserId


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: str  # UUID string
    content: str
    author_id: str  # User ID from the identity header
    parent_id: str | None = None  # Parent comment ID for replies


class CommentResponse(BaseModel):
    """A single comment."""

    comment_id: str
    post_id: str
    author_id: str
    content: str
    parent_id: str | None
    depth: int
    path: str
    score: int
    upvotes: int
    downvotes: int
    deleted: bool
    collapsed: bool
    edited: bool
    created_at: datetime
    updated_at: datetime


def to_comment_response(comment: Comment) -> CommentResponse:
    """Build the response model of a comment."""
    return CommentResponse(
        comment_id=str(comment.id),
        post_id=str(comment.post_id),
        author_id=str(comment.author_id),
        content=comment.content,
        parent_id=str(comment.parent_id) if comment.parent_id else None,
        depth=comment.depth,
        path=comment.path,
        score=comment.score,
        upvotes=comment.upvotes,
        downvotes=comment.downvotes,
        deleted=comment.deleted,
        collapsed=comment.collapsed,
        edited=comment.edited,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


class CreateCommentUseCase(BaseUseCase):
    """Use case for commenting on a post or replying to another comment."""

    def __init__(
        self,
        comment_service: CommentService,
        user_service: UserService,
    ) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
            user_service: User domain service
        """
        self.comment_service = comment_service
        self.user_service = user_service

    async def execute(self, request: CreateCommentRequest) -> CommentResponse:
        """Execute create comment flow.

        Steps:
        1. Verify the author is registered
        2. Create the comment; the service validates the post and parent
           and bumps the post's comment count in the same unit of work

        Raises:
            NotFoundError: If the author isn't registered
            TargetNotFound: If the post or parent doesn't exist
            ContentDeletedException: If the post or parent is deleted
            PostLockedError: If the post is locked
            ParentPostMismatch: If the parent is on another post
            MaxDepthExceeded: If the reply would nest too deep
        """
        author_id = UserId(UUID(request.author_id))
        await self.user_service.get_by_id(author_id)

        parent_comment_id = (
            CommentId(UUID(request.parent_id)) if request.parent_id else None
        )
        comment = await self.comment_service.create_comment(
            post_id=PostId(UUID(request.post_id)),
            author_id=author_id,
            content=request.content,
            parent_id=parent_comment_id,
        )

        return to_comment_response(comment)
