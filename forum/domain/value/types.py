"""Domain value objects for the forum.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum, IntEnum

from pydantic import Field, field_validator

from forum.domain.value.common import RootValueObject, ValueObject


class VoteValue(IntEnum):
    """Direction of a vote. Stored in the ledger as +1 / -1."""

    UP = 1
    DOWN = -1


class VotableType(str, Enum):
    """Type of entity that can be voted on."""

    POST = "post"
    COMMENT = "comment"


class PostType(str, Enum):
    """Kind of post content."""

    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    VIDEO = "video"

    @property
    def requires_url(self) -> bool:
        """Link and media posts point at a URL."""
        return self in (PostType.LINK, PostType.IMAGE, PostType.VIDEO)


class PostSortOrder(str, Enum):
    """Orderings available for post listings."""

    HOT = "hot"
    NEW = "new"
    TOP = "top"
    CONTROVERSIAL = "controversial"


class ThreadSortOrder(str, Enum):
    """Orderings available for comment threads."""

    BEST = "best"
    NEW = "new"


class CommunitySortOrder(str, Enum):
    """Orderings available for community listings."""

    POPULAR = "popular"
    ACTIVE = "active"
    NEW = "new"


class Username(RootValueObject[str]):
    """Unique, human-readable user name.

    3-50 characters of letters, digits, underscores and hyphens.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not re.match(r"^[A-Za-z0-9_-]{3,50}$", v):
            raise ValueError(
                "Username must be 3-50 characters of letters, digits, '_' or '-'"
            )
        return v


class Slug(RootValueObject[str]):
    """URL-safe community slug.

    Lowercase letters, digits and hyphens, 1-100 characters.
    Examples: 'neuroscience', 'machine-learning'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        if not re.match(r"^[a-z0-9-]+$", v):
            raise ValueError(
                "Slug must contain only lowercase letters, digits and hyphens"
            )
        if len(v) > 100:
            raise ValueError("Slug must be 1-100 characters")
        return v


class Karma(ValueObject):
    """Reputation received on a user's posts and comments.

    ``total`` is always ``post + comment``; all three are written only by the
    karma ledger.
    """

    post: int = 0
    comment: int = 0
    total: int = 0


class VoteTally(ValueObject):
    """Vote aggregates of a single post or comment."""

    score: int = 0
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)

    @classmethod
    def from_counts(cls, upvotes: int, downvotes: int) -> "VoteTally":
        """Build a tally from ledger counts."""
        return cls(score=upvotes - downvotes, upvotes=upvotes, downvotes=downvotes)
