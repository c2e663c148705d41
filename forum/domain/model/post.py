"""Post aggregate root."""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from forum.domain.model.common import DomainModel, utc_now
from forum.domain.value import CommunityId, PostId, PostType, UserId, VoteTally


class Post(DomainModel):
    """Post aggregate root.

    Vote aggregates (``score``, ``upvotes``, ``downvotes``, ``hot_score``,
    ``controversy_score``) mirror the vote ledger and are only written by
    the aggregate maintainer. ``comment_count`` tracks live comments.
    Deletion is soft: the row stays so that comments and votes keep a
    valid target.
    """

    id: PostId
    author_id: UserId
    community_id: CommunityId
    title: str = Field(min_length=3, max_length=300)
    content: Optional[str] = Field(default=None, max_length=40000)
    type: PostType = PostType.TEXT
    url: Optional[str] = None
    score: int = 0
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    hot_score: float = 0.0
    controversy_score: float = 0.0
    deleted: bool = False
    locked: bool = False
    pinned: bool = False
    nsfw: bool = False
    spoiler: bool = False
    edited: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_post_type_content(self) -> "Post":
        """Link and media posts must carry a URL."""
        if self.type.requires_url and not self.url:
            raise ValueError(f"URL is required for {self.type.value} posts")
        return self

    @property
    def tally(self) -> VoteTally:
        return VoteTally(
            score=self.score, upvotes=self.upvotes, downvotes=self.downvotes
        )
