"""In-memory post repository for testing."""

from datetime import datetime
from typing import Optional

from forum.domain.model.post import Post
from forum.domain.repository.post import PostRepository
from forum.domain.value import CommunityId, PostId, PostSortOrder, UserId

from .store import InMemoryStore


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self.store.posts.get(post_id)

    async def lock(self, post_id: PostId) -> Optional[Post]:
        """Read a post; the unit of work already serializes writers."""
        return self.store.posts.get(post_id)

    async def find_all(
        self,
        community_id: Optional[CommunityId] = None,
        author_id: Optional[UserId] = None,
        sort: PostSortOrder = PostSortOrder.HOT,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Post]:
        """Find posts with filtering and pagination."""
        posts = [p for p in self.store.posts.values() if not p.deleted]

        if community_id is not None:
            posts = [p for p in posts if p.community_id == community_id]
        if author_id is not None:
            posts = [p for p in posts if p.author_id == author_id]

        # Recency first so the stable ranking sort breaks ties by it
        posts.sort(key=lambda p: p.created_at, reverse=True)
        if sort == PostSortOrder.HOT:
            posts.sort(key=lambda p: p.hot_score, reverse=True)
        elif sort == PostSortOrder.TOP:
            posts.sort(key=lambda p: p.score, reverse=True)
        elif sort == PostSortOrder.CONTROVERSIAL:
            posts.sort(key=lambda p: p.controversy_score, reverse=True)
        if community_id is not None:
            posts.sort(key=lambda p: p.pinned, reverse=True)

        return posts[offset : offset + limit]

    async def find_ids_created_since(self, since: datetime) -> list[PostId]:
        """IDs of non-deleted posts created at or after ``since``."""
        posts = sorted(self.store.posts.values(), key=lambda p: p.created_at)
        return [p.id for p in posts if not p.deleted and p.created_at >= since]

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted posts."""
        return sum(
            1
            for p in self.store.posts.values()
            if p.author_id == author_id and not p.deleted
        )

    async def create(self, post: Post) -> Post:
        """Insert a new post."""
        self.store.posts[post.id] = post
        return post

    async def update_aggregates(
        self,
        post_id: PostId,
        upvotes: int,
        downvotes: int,
        hot_score: float,
        controversy_score: float,
    ) -> Post:
        """Overwrite the vote aggregates with freshly recounted values."""
        updated = self.store.posts[post_id].model_copy(
            update={
                "upvotes": upvotes,
                "downvotes": downvotes,
                "score": upvotes - downvotes,
                "hot_score": hot_score,
                "controversy_score": controversy_score,
            }
        )
        self.store.posts[post_id] = updated
        return updated

    async def update_content(
        self,
        post_id: PostId,
        title: str,
        content: Optional[str],
        nsfw: bool,
        spoiler: bool,
        at: datetime,
    ) -> Optional[Post]:
        """Replace the author-editable fields of a live post."""
        post = self.store.posts.get(post_id)
        if post is None or post.deleted:
            return None

        self._update(
            post_id,
            title=title,
            content=content,
            nsfw=nsfw,
            spoiler=spoiler,
            edited=True,
            updated_at=at,
        )
        return self.store.posts[post_id]

    async def set_moderation_flags(
        self, post_id: PostId, locked: bool, pinned: bool, at: datetime
    ) -> Optional[Post]:
        """Set the ``locked`` and ``pinned`` flags."""
        if post_id not in self.store.posts:
            return None

        self._update(post_id, locked=locked, pinned=pinned, updated_at=at)
        return self.store.posts[post_id]

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Increment comment_count by 1."""
        post = self.store.posts.get(post_id)
        if post:
            self._update(post_id, comment_count=post.comment_count + 1)

    async def decrement_comment_count(self, post_id: PostId) -> None:
        """Decrement comment_count by 1 (minimum 0)."""
        post = self.store.posts.get(post_id)
        if post and post.comment_count > 0:
            self._update(post_id, comment_count=post.comment_count - 1)

    async def mark_deleted(self, post_id: PostId, at: datetime) -> bool:
        """Soft-delete a post."""
        post = self.store.posts.get(post_id)
        if post is None or post.deleted:
            return False

        self._update(post_id, deleted=True, deleted_at=at, updated_at=at)
        return True

    def _update(self, post_id: PostId, **fields: object) -> None:
        if post_id in self.store.posts:
            self.store.posts[post_id] = self.store.posts[post_id].model_copy(
                update=fields
            )
