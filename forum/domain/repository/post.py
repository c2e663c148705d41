"""Post repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.post import Post
from forum.domain.value import CommunityId, PostId, PostSortOrder, UserId


class PostRepository(ABC):
    """Repository for Post aggregate.

    Vote aggregates, ``comment_count`` and the deleted flag each have a
    dedicated writer. There is no general update method.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def lock(self, post_id: PostId) -> Optional[Post]:
        """Read a post and hold a write lock on its row until the transaction ends.

        Concurrent lockers of the same post queue behind each other, which
        serializes aggregate recomputation per post.

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        community_id: Optional[CommunityId] = None,
        author_id: Optional[UserId] = None,
        sort: PostSortOrder = PostSortOrder.HOT,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Post]:
        """List non-deleted posts.

        Args:
            community_id: Restrict to one community
            author_id: Restrict to one author
            sort: Ordering; ties are broken by recency. Pinned posts come
                first when listing a single community.
            limit: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            List of posts
        """
        pass

    @abstractmethod
    async def find_ids_created_since(self, since: datetime) -> list[PostId]:
        """IDs of non-deleted posts created at or after ``since``."""
        pass

    @abstractmethod
    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted posts."""
        pass

    @abstractmethod
    async def create(self, post: Post) -> Post:
        """Insert a new post."""
        pass

    @abstractmethod
    async def update_aggregates(
        self,
        post_id: PostId,
        upvotes: int,
        downvotes: int,
        hot_score: float,
        controversy_score: float,
    ) -> Post:
        """Overwrite the vote aggregates with freshly recounted values.

        ``score`` is stored as ``upvotes - downvotes``.

        Returns:
            The updated post
        """
        pass

    @abstractmethod
    async def update_content(
        self,
        post_id: PostId,
        title: str,
        content: Optional[str],
        nsfw: bool,
        spoiler: bool,
        at: datetime,
    ) -> Optional[Post]:
        """Replace the author-editable fields of a live post and mark it edited.

        Returns:
            The updated post, or None if it doesn't exist or is deleted
        """
        pass

    @abstractmethod
    async def set_moderation_flags(
        self, post_id: PostId, locked: bool, pinned: bool, at: datetime
    ) -> Optional[Post]:
        """Set the moderator-owned ``locked`` and ``pinned`` flags.

        Moderation doesn't count as an edit.

        Returns:
            The updated post, or None if it doesn't exist
        """
        pass

    @abstractmethod
    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment ``comment_count`` by 1."""
        pass

    @abstractmethod
    async def decrement_comment_count(self, post_id: PostId) -> None:
        """Atomically decrement ``comment_count`` by 1, never below zero."""
        pass

    @abstractmethod
    async def mark_deleted(self, post_id: PostId, at: datetime) -> bool:
        """Soft-delete a post.

        Returns:
            True if the post went from live to deleted, False if it was
            already deleted or doesn't exist
        """
        pass
