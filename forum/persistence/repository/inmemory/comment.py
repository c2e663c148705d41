"""In-memory comment repository for testing."""

from datetime import datetime
from typing import Optional

from forum.domain.model.comment import DELETED_CONTENT, PATH_SEPARATOR, Comment
from forum.domain.repository.comment import CommentRepository
from forum.domain.value import CommentId, PostId, UserId

from .store import InMemoryStore


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self.store.comments.get(comment_id)

    async def lock(
        self, comment_id: CommentId, shared: bool = False
    ) -> Optional[Comment]:
        return self.store.comments.get(comment_id)

    async def find_by_post(
        self,
        post_id: PostId,
        path_prefix: Optional[str] = None,
    ) -> list[Comment]:
        """Find every comment of a post in path order."""
        comments = [c for c in self.store.comments.values() if c.post_id == post_id]

        if path_prefix is not None:
            comments = [
                c
                for c in comments
                if c.path == path_prefix
                or c.path.startswith(path_prefix + PATH_SEPARATOR)
            ]

        return sorted(comments, key=lambda c: c.path)

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted comments."""
        return sum(
            1
            for c in self.store.comments.values()
            if c.author_id == author_id and not c.deleted
        )

    async def create(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        self.store.comments[comment.id] = comment
        return comment

    async def update_aggregates(
        self, comment_id: CommentId, upvotes: int, downvotes: int
    ) -> Comment:
        """Overwrite the vote aggregates with freshly recounted values."""
        updated = self.store.comments[comment_id].model_copy(
            update={
                "upvotes": upvotes,
                "downvotes": downvotes,
                "score": upvotes - downvotes,
            }
        )
        self.store.comments[comment_id] = updated
        return updated

    async def update_content(
        self, comment_id: CommentId, content: str, at: datetime
    ) -> Optional[Comment]:
        """Replace the content of a live comment."""
        comment = self.store.comments.get(comment_id)
        if comment is None or comment.deleted:
            return None

        updated = comment.model_copy(
            update={"content": content, "edited": True, "updated_at": at}
        )
        self.store.comments[comment_id] = updated
        return updated

    async def set_collapsed(
        self, comment_id: CommentId, collapsed: bool, at: datetime
    ) -> Optional[Comment]:
        """Set the moderator collapse flag."""
        comment = self.store.comments.get(comment_id)
        if comment is None:
            return None

        updated = comment.model_copy(update={"collapsed": collapsed, "updated_at": at})
        self.store.comments[comment_id] = updated
        return updated

    async def mark_deleted(self, comment_id: CommentId, at: datetime) -> bool:
        """Soft-delete a comment, keeping its path."""
        comment = self.store.comments.get(comment_id)
        if comment is None or comment.deleted:
            return False

        self.store.comments[comment_id] = comment.model_copy(
            update={
                "deleted": True,
                "deleted_at": at,
                "updated_at": at,
                "content": DELETED_CONTENT,
            }
        )
        return True
