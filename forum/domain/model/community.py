"""Community aggregate and membership."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel, utc_now
from forum.domain.value import CommunityId, Slug, UserId


class Community(DomainModel):
    """A topic area that posts are published into.

    ``member_count`` and ``post_count`` are counters maintained alongside
    membership rows and post inserts; clients never set them.
    """

    id: CommunityId
    slug: Slug
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    moderators: list[UserId] = Field(default_factory=list)
    member_count: int = Field(default=0, ge=0)
    post_count: int = Field(default=0, ge=0)
    last_activity: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Membership(DomainModel):
    """A user's membership of a community, identified by the pair."""

    community_id: CommunityId
    user_id: UserId
    joined_at: datetime = Field(default_factory=utc_now)
