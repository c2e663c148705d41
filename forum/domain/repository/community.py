"""Community repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from forum.domain.model.community import Community
from forum.domain.value import CommunityId, CommunitySortOrder, Slug, UserId


class CommunityRepository(ABC):
    """Repository for Community aggregate and its memberships.

    ``member_count`` and ``post_count`` are only changed by ``add_member``,
    ``remove_member`` and ``record_post``.
    """

    @abstractmethod
    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        pass

    @abstractmethod
    async def find_by_slug(self, slug: Slug) -> Optional[Community]:
        pass

    @abstractmethod
    async def find_all(
        self,
        sort: CommunitySortOrder = CommunitySortOrder.POPULAR,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Community]:
        """List communities.

        Args:
            sort: popular (members), active (last activity) or new (created)
            limit: Maximum number of communities to return
            offset: Number of communities to skip
        """
        pass

    @abstractmethod
    async def create(self, community: Community) -> Community:
        """Insert a new community.

        Raises:
            AlreadyExistsError: If the slug or name is taken
        """
        pass

    @abstractmethod
    async def add_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Insert a membership row and bump ``member_count`` with it.

        Returns:
            True if the membership was created, False if it already existed
        """
        pass

    @abstractmethod
    async def remove_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        """Delete a membership row and decrement ``member_count`` with it.

        Returns:
            True if a membership was removed, False if there was none
        """
        pass

    @abstractmethod
    async def is_member(self, community_id: CommunityId, user_id: UserId) -> bool:
        pass

    @abstractmethod
    async def record_post(self, community_id: CommunityId, at: datetime) -> None:
        """Atomically increment ``post_count`` and set ``last_activity``."""
        pass
