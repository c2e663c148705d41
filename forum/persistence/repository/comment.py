"""PostgreSQL implementation of Comment repository."""

from datetime import datetime
from typing import List, Optional

import logfire
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Comment
from forum.domain.model.comment import DELETED_CONTENT, PATH_SEPARATOR
from forum.domain.repository import CommentRepository
from forum.domain.value import CommentId, PostId, UserId
from forum.persistence.mappers import comment_to_dict, row_to_comment
from forum.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def lock(
        self, comment_id: CommentId, shared: bool = False
    ) -> Optional[Comment]:
        """Read a comment with ``SELECT ... FOR UPDATE`` (or ``FOR SHARE``)."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.id == comment_id)
            .with_for_update(read=shared)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_post(
        self,
        post_id: PostId,
        path_prefix: Optional[str] = None,
    ) -> List[Comment]:
        """Find every comment of a post in path order, with one query."""
        with logfire.span(
            "comment_repository.find_by_post",
            post_id=str(post_id),
            path_prefix=path_prefix,
        ):
            stmt = select(comments_table).where(comments_table.c.post_id == post_id)

            if path_prefix is not None:
                stmt = stmt.where(
                    (comments_table.c.path == path_prefix)
                    | comments_table.c.path.startswith(
                        path_prefix + PATH_SEPARATOR, autoescape=True
                    )
                )

            stmt = stmt.order_by(comments_table.c.path)
            result = await self.session.execute(stmt)
            comments = [row_to_comment(row._asdict()) for row in result.fetchall()]

            logfire.info("Found comments", post_id=str(post_id), count=len(comments))
            return comments

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted comments."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.author_id == author_id)
            .where(comments_table.c.deleted.is_(False))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def create(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        with logfire.span(
            "comment_repository.create",
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            depth=comment.depth,
        ):
            stmt = comments_table.insert().values(**comment_to_dict(comment))
            await self.session.execute(stmt)
            await self.session.flush()
            return comment

    async def update_aggregates(
        self, comment_id: CommentId, upvotes: int, downvotes: int
    ) -> Comment:
        """Overwrite the vote aggregates with freshly recounted values."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(upvotes=upvotes, downvotes=downvotes, score=upvotes - downvotes)
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict())

    async def update_content(
        self, comment_id: CommentId, content: str, at: datetime
    ) -> Optional[Comment]:
        """Replace the content of a live comment."""
        with logfire.span(
            "comment_repository.update_content",
            comment_id=str(comment_id),
            content_length=len(content),
        ):
            stmt = (
                update(comments_table)
                .where(comments_table.c.id == comment_id)
                .where(comments_table.c.deleted.is_(False))
                .values(content=content, edited=True, updated_at=at)
                .returning(comments_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if row is None:
                logfire.warn("Comment not found or deleted", comment_id=str(comment_id))
                return None

            await self.session.flush()
            return row_to_comment(row._asdict())

    async def set_collapsed(
        self, comment_id: CommentId, collapsed: bool, at: datetime
    ) -> Optional[Comment]:
        """Set the moderator collapse flag."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(collapsed=collapsed, updated_at=at)
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def mark_deleted(self, comment_id: CommentId, at: datetime) -> bool:
        """Soft-delete a comment, keeping its row and path."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .where(comments_table.c.deleted.is_(False))
            .values(
                deleted=True,
                deleted_at=at,
                updated_at=at,
                content=DELETED_CONTENT,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
