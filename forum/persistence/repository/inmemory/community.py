"""In-memory community repository for testing."""

from datetime import datetime, timezone
from typing import Optional

from forum.domain.error import AlreadyExistsError
from forum.domain.model.common import utc_now
from forum.domain.model.community import Community, Membership
from forum.domain.repository.community import CommunityRepository
from forum.domain.value import CommunityId, CommunitySortOrder, Slug, UserId

from .store import InMemoryStore

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryCommunityRepository(CommunityRepository):
    """In-memory implementation of CommunityRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        """Find a community by ID."""
        return self.store.communities.get(community_id)

    async def find_by_slug(self, slug: Slug) -> Optional[Community]:
        """Find a community by slug."""
        for community in self.store.communities.values():
            if community.slug == slug:
                return community
        return None

    async def find_all(
        self,
        sort: CommunitySortOrder = CommunitySortOrder.POPULAR,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Community]:
        """List communities with pagination."""
        communities = sorted(
            self.store.communities.values(), key=lambda c: c.created_at, reverse=True
        )

        if sort == CommunitySortOrder.POPULAR:
            communities.sort(key=lambda c: c.member_count, reverse=True)
        elif sort == CommunitySortOrder.ACTIVE:
            communities.sort(key=lambda c: c.last_activity or _EPOCH, reverse=True)

        return communities[offset : offset + limit]

    async def create(self, community: Community) -> Community:
        """Insert a new community.

        Raises:
            AlreadyExistsError: If the slug or name is taken
        """
        for existing in self.store.communities.values():
            if existing.slug == community.slug:
                raise AlreadyExistsError("Community", "slug", community.slug.root)
            if existing.name == community.name:
                raise AlreadyExistsError("Community", "name", community.name)

        stored = community.model_copy(update={"member_count": 0, "post_count": 0})
        self.store.communities[community.id] = stored
        return stored

    async def add_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Insert a membership and bump ``member_count`` with it."""
        key = (community_id, user_id)
        if key in self.store.memberships:
            return False

        self.store.memberships[key] = Membership(
            community_id=community_id, user_id=user_id, joined_at=utc_now()
        )
        self._adjust_members(community_id, 1)
        return True

    async def remove_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Delete a membership and decrement ``member_count`` with it."""
        if self.store.memberships.pop((community_id, user_id), None) is None:
            return False

        self._adjust_members(community_id, -1)
        return True

    async def is_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        return (community_id, user_id) in self.store.memberships

    async def record_post(self, community_id: CommunityId, at: datetime) -> None:
        """Increment ``post_count`` and set ``last_activity``."""
        community = self.store.communities.get(community_id)
        if community:
            self.store.communities[community_id] = community.model_copy(
                update={"post_count": community.post_count + 1, "last_activity": at}
            )

    def _adjust_members(self, community_id: CommunityId, delta: int) -> None:
        community = self.store.communities.get(community_id)
        if community:
            self.store.communities[community_id] = community.model_copy(
                update={"member_count": max(community.member_count + delta, 0)}
            )
