"""PostgreSQL implementation of Community repository."""

from datetime import datetime
from typing import Optional

import logfire
from sqlalchemy import desc, exists, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.error import AlreadyExistsError
from forum.domain.model import Community
from forum.domain.repository import CommunityRepository
from forum.domain.value import CommunityId, CommunitySortOrder, Slug, UserId
from forum.persistence.mappers import community_to_dict, row_to_community
from forum.persistence.tables import communities_table, community_members_table


class PostgresCommunityRepository(CommunityRepository):
    """PostgreSQL implementation of CommunityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        """Find a community by ID."""
        stmt = select(communities_table).where(communities_table.c.id == community_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_community(row._asdict()) if row else None

    async def find_by_slug(self, slug: Slug) -> Optional[Community]:
        """Find a community by slug."""
        with logfire.span("community_repository.find_by_slug", slug=slug.root):
            stmt = select(communities_table).where(
                communities_table.c.slug == slug.root
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Community not found", slug=slug.root)
                return None

            return row_to_community(row._asdict())

    async def find_all(
        self,
        sort: CommunitySortOrder = CommunitySortOrder.POPULAR,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Community]:
        """List communities with pagination."""
        with logfire.span(
            "community_repository.find_all", sort=sort.value, limit=limit, offset=offset
        ):
            stmt = select(communities_table)

            if sort == CommunitySortOrder.POPULAR:
                stmt = stmt.order_by(desc(communities_table.c.member_count))
            elif sort == CommunitySortOrder.ACTIVE:
                stmt = stmt.order_by(
                    communities_table.c.last_activity.desc().nulls_last()
                )
            stmt = stmt.order_by(desc(communities_table.c.created_at))

            stmt = stmt.limit(limit).offset(offset)
            result = await self.session.execute(stmt)
            communities = [row_to_community(row._asdict()) for row in result.fetchall()]

            logfire.info("Found communities", count=len(communities))
            return communities

    async def create(self, community: Community) -> Community:
        """Insert a new community."""
        with logfire.span(
            "community_repository.create",
            community_id=str(community.id),
            slug=community.slug.root,
        ):
            stmt = select(communities_table.c.slug, communities_table.c.name).where(
                (communities_table.c.slug == community.slug.root)
                | (communities_table.c.name == community.name)
            )
            result = await self.session.execute(stmt)
            clash = result.fetchone()
            if clash:
                if clash.slug == community.slug.root:
                    raise AlreadyExistsError("Community", "slug", community.slug.root)
                raise AlreadyExistsError("Community", "name", community.name)

            insert_stmt = (
                communities_table.insert()
                .values(**community_to_dict(community))
                .returning(communities_table)
            )
            try:
                result = await self.session.execute(insert_stmt)
            except IntegrityError as e:
                raise AlreadyExistsError(
                    "Community", "slug", community.slug.root
                ) from e

            row = result.fetchone()
            await self.session.flush()
            return row_to_community(row._asdict())

    async def add_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Insert a membership row and bump ``member_count`` with it."""
        stmt = (
            insert(community_members_table)
            .values(community_id=community_id, user_id=user_id)
            .on_conflict_do_nothing(constraint="pk_community_members")
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return False

        await self.session.execute(
            communities_table.update()
            .where(communities_table.c.id == community_id)
            .values(member_count=communities_table.c.member_count + 1)
        )
        await self.session.flush()
        return True

    async def remove_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Delete a membership row and decrement ``member_count`` with it."""
        stmt = community_members_table.delete().where(
            (community_members_table.c.community_id == community_id)
            & (community_members_table.c.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return False

        await self.session.execute(
            communities_table.update()
            .where(communities_table.c.id == community_id)
            .where(communities_table.c.member_count > 0)
            .values(member_count=communities_table.c.member_count - 1)
        )
        await self.session.flush()
        return True

    async def is_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        stmt = select(
            exists().where(
                (community_members_table.c.community_id == community_id)
                & (community_members_table.c.user_id == user_id)
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def record_post(self, community_id: CommunityId, at: datetime) -> None:
        """Atomically increment ``post_count`` and set ``last_activity``."""
        stmt = (
            communities_table.update()
            .where(communities_table.c.id == community_id)
            .values(
                post_count=communities_table.c.post_count + 1,
                last_activity=at,
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
