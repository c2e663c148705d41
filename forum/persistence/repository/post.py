"""PostgreSQL implementation of Post repository."""

from datetime import datetime
from typing import List, Optional

import logfire
from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.model import Post
from forum.domain.repository import PostRepository
from forum.domain.value import CommunityId, PostId, PostSortOrder, UserId
from forum.persistence.mappers import post_to_dict, row_to_post
from forum.persistence.tables import posts_table

SORT_COLUMNS = {
    PostSortOrder.HOT: posts_table.c.hot_score,
    PostSortOrder.TOP: posts_table.c.score,
    PostSortOrder.CONTROVERSIAL: posts_table.c.controversy_score,
}


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        with logfire.span("post_repository.find_by_id", post_id=str(post_id)):
            stmt = select(posts_table).where(posts_table.c.id == post_id)
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Post not found", post_id=str(post_id))
                return None

            return row_to_post(row._asdict())

    async def lock(self, post_id: PostId) -> Optional[Post]:
        """Read a post with ``SELECT ... FOR UPDATE``."""
        stmt = select(posts_table).where(posts_table.c.id == post_id).with_for_update()
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def find_all(
        self,
        community_id: Optional[CommunityId] = None,
        author_id: Optional[UserId] = None,
        sort: PostSortOrder = PostSortOrder.HOT,
        limit: int = 25,
        offset: int = 0,
    ) -> List[Post]:
        """Find posts with filtering and pagination."""
        with logfire.span(
            "post_repository.find_all",
            community_id=str(community_id) if community_id else None,
            author_id=str(author_id) if author_id else None,
            sort=sort.value,
            limit=limit,
            offset=offset,
        ):
            stmt = select(posts_table).where(posts_table.c.deleted.is_(False))

            if community_id is not None:
                stmt = stmt.where(posts_table.c.community_id == community_id)
            if author_id is not None:
                stmt = stmt.where(posts_table.c.author_id == author_id)

            # Pinned posts lead a community listing
            if community_id is not None:
                stmt = stmt.order_by(desc(posts_table.c.pinned))
            # Ranking column next, recency breaks ties
            if sort in SORT_COLUMNS:
                stmt = stmt.order_by(desc(SORT_COLUMNS[sort]))
            stmt = stmt.order_by(desc(posts_table.c.created_at), posts_table.c.id)

            stmt = stmt.limit(limit).offset(offset)

            result = await self.session.execute(stmt)
            posts = [row_to_post(row._asdict()) for row in result.fetchall()]

            logfire.info("Found posts", count=len(posts))
            return posts

    async def find_ids_created_since(self, since: datetime) -> list[PostId]:
        """IDs of non-deleted posts created at or after ``since``."""
        stmt = (
            select(posts_table.c.id)
            .where(posts_table.c.deleted.is_(False))
            .where(posts_table.c.created_at >= since)
            .order_by(posts_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [PostId(row.id) for row in result.fetchall()]

    async def count_by_author(self, author_id: UserId) -> int:
        """Count an author's non-deleted posts."""
        stmt = (
            select(func.count())
            .select_from(posts_table)
            .where(posts_table.c.author_id == author_id)
            .where(posts_table.c.deleted.is_(False))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def create(self, post: Post) -> Post:
        """Insert a new post."""
        with logfire.span(
            "post_repository.create",
            post_id=str(post.id),
            community_id=str(post.community_id),
            title=post.title,
        ):
            stmt = posts_table.insert().values(**post_to_dict(post))
            await self.session.execute(stmt)
            await self.session.flush()
            logfire.info("Post inserted", post_id=str(post.id))
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
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(
                upvotes=upvotes,
                downvotes=downvotes,
                score=upvotes - downvotes,
                hot_score=hot_score,
                controversy_score=controversy_score,
            )
            .returning(posts_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_post(row._asdict())

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
        with logfire.span("post_repository.update_content", post_id=str(post_id)):
            stmt = (
                update(posts_table)
                .where(posts_table.c.id == post_id)
                .where(posts_table.c.deleted.is_(False))
                .values(
                    title=title,
                    content=content,
                    nsfw=nsfw,
                    spoiler=spoiler,
                    edited=True,
                    updated_at=at,
                )
                .returning(posts_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if row is None:
                logfire.warn("Post not found or deleted", post_id=str(post_id))
                return None

            await self.session.flush()
            return row_to_post(row._asdict())

    async def set_moderation_flags(
        self, post_id: PostId, locked: bool, pinned: bool, at: datetime
    ) -> Optional[Post]:
        """Set the ``locked`` and ``pinned`` flags."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(locked=locked, pinned=pinned, updated_at=at)
            .returning(posts_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_post(row._asdict()) if row else None

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment comment_count by 1."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(comment_count=posts_table.c.comment_count + 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def decrement_comment_count(self, post_id: PostId) -> None:
        """Atomically decrement comment_count by 1 (minimum 0)."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .where(posts_table.c.comment_count > 0)  # Don't go below 0
            .values(comment_count=posts_table.c.comment_count - 1)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def mark_deleted(self, post_id: PostId, at: datetime) -> bool:
        """Soft-delete a post."""
        with logfire.span("post_repository.mark_deleted", post_id=str(post_id)):
            stmt = (
                update(posts_table)
                .where(posts_table.c.id == post_id)
                .where(posts_table.c.deleted.is_(False))
                .values(deleted=True, deleted_at=at, updated_at=at)
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount > 0
