"""Community domain service."""

from uuid import uuid4

import logfire

from forum.domain.error import AlreadyExistsError, NotFoundError
from forum.domain.model.common import utc_now
from forum.domain.model.community import Community
from forum.domain.repository import CommunityRepository, UnitOfWork
from forum.domain.value import CommunityId, CommunitySortOrder, Slug, UserId

from .base import Service


class CommunityService(Service):
    """Domain service for communities and memberships."""

    def __init__(
        self,
        community_repository: CommunityRepository,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize community service.

        Args:
            community_repository: Community repository
            unit_of_work: Atomic scope for membership writes
        """
        self.community_repository = community_repository
        self.unit_of_work = unit_of_work

    async def create_community(
        self,
        creator_id: UserId,
        name: str,
        slug: Slug,
        description: str | None = None,
    ) -> Community:
        """Create a community. The creator becomes its first moderator and member.

        Raises:
            AlreadyExistsError: If the slug is taken
        """
        with logfire.span(
            "community_service.create_community",
            creator_id=str(creator_id),
            slug=slug.root,
        ):
            async with self.unit_of_work.atomic():
                if await self.community_repository.find_by_slug(slug):
                    logfire.warn("Community slug taken", slug=slug.root)
                    raise AlreadyExistsError("Community", "slug", slug.root)

                now = utc_now()
                community = await self.community_repository.create(
                    Community(
                        id=CommunityId(uuid4()),
                        slug=slug,
                        name=name,
                        description=description,
                        moderators=[creator_id],
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.community_repository.add_member(community.id, creator_id)
                created = await self.community_repository.find_by_id(community.id)

            logfire.info(
                "Community created", community_id=str(community.id), slug=slug.root
            )
            return created or community

    async def get_by_slug(self, slug: Slug) -> Community:
        """Get a community by slug.

        Raises:
            NotFoundError: If no community has this slug
        """
        with logfire.span("community_service.get_by_slug", slug=slug.root):
            community = await self.community_repository.find_by_slug(slug)
            if not community:
                logfire.warn("Community not found", slug=slug.root)
                raise NotFoundError("Community", slug.root)
            return community

    async def list_communities(
        self,
        sort: CommunitySortOrder = CommunitySortOrder.POPULAR,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Community]:
        """List communities."""
        with logfire.span("community_service.list_communities", sort=sort.value):
            return await self.community_repository.find_all(
                sort=sort, limit=limit, offset=offset
            )

    async def join(self, slug: Slug, user_id: UserId) -> tuple[Community, bool]:
        """Add a user to a community. Joining twice changes nothing.

        Returns:
            The community after the change, and whether a membership was created
        """
        with logfire.span(
            "community_service.join", slug=slug.root, user_id=str(user_id)
        ):
            async with self.unit_of_work.atomic():
                community = await self.get_by_slug(slug)
                joined = await self.community_repository.add_member(
                    community.id, user_id
                )
                current = await self.community_repository.find_by_id(community.id)

            logfire.info(
                "Community join", slug=slug.root, user_id=str(user_id), joined=joined
            )
            return current or community, joined

    async def leave(self, slug: Slug, user_id: UserId) -> tuple[Community, bool]:
        """Remove a user from a community. Leaving without membership changes nothing.

        Returns:
            The community after the change, and whether a membership was removed
        """
        with logfire.span(
            "community_service.leave", slug=slug.root, user_id=str(user_id)
        ):
            async with self.unit_of_work.atomic():
                community = await self.get_by_slug(slug)
                left = await self.community_repository.remove_member(
                    community.id, user_id
                )
                current = await self.community_repository.find_by_id(community.id)

            logfire.info(
                "Community leave", slug=slug.root, user_id=str(user_id), left=left
            )
            return current or community, left

    async def is_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        return await self.community_repository.is_member(community_id, user_id)
