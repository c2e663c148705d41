"""Comment repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.comment import Comment
from forum.domain.value import CommentId, PostId, UserId


class CommentRepository(ABC):
    """Repository for Comment entity."""

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        pass

    @abstractmethod
    async def lock(
        self, comment_id: CommentId, shared: bool = False
    ) -> Optional[Comment]:
        """Read a comment and lock its row until the transaction ends.

        A shared lock lets other readers (sibling replies) proceed but blocks
        writers such as a soft delete.
        """
        pass

    @abstractmethod
    async def find_by_post(
        self,
        post_id: PostId,
        path_prefix: Optional[str] = None,
    ) -> list[Comment]:
        """Find every comment of a post, deleted ones included, in path order.

        Args:
            post_id: The post
            path_prefix: Restrict to the comment with this path and its
                descendants

        Returns:
            Comments ordered by path
        """
        pass

    @abstractmethod
    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted comments."""
        pass

    @abstractmethod
    async def create(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        pass

    @abstractmethod
    async def update_aggregates(
        self, comment_id: CommentId, upvotes: int, downvotes: int
    ) -> Comment:
        """Overwrite the vote aggregates with freshly recounted values."""
        pass

    @abstractmethod
    async def update_content(
        self, comment_id: CommentId, content: str, at: datetime
    ) -> Optional[Comment]:
        """Replace the content of a live comment and mark it edited.

        Returns:
            The updated comment, or None if it doesn't exist or is deleted
        """
        pass

    @abstractmethod
    async def set_collapsed(
        self, comment_id: CommentId, collapsed: bool, at: datetime
    ) -> Optional[Comment]:
        """Set the moderator collapse flag.

        Returns:
            The updated comment, or None if it doesn't exist
        """
        pass

    @abstractmethod
    async def mark_deleted(self, comment_id: CommentId, at: datetime) -> bool:
        """Soft-delete a comment and replace its content with ``[deleted]``.

        Returns:
            True if the comment went from live to deleted
        """
        pass
