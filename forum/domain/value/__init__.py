"""Domain value objects for the forum."""

from forum.domain.value.identifiers import (
    CommentId,
    CommunityId,
    PostId,
    UserId,
)
from forum.domain.value.types import (
    CommunitySortOrder,
    Karma,
    PostSortOrder,
    PostType,
    Slug,
    ThreadSortOrder,
    Username,
    VotableType,
    VoteTally,
    VoteValue,
)

__all__ = [
    # Identifiers
    "UserId",
    "CommunityId",
    "PostId",
    "CommentId",
    # Types
    "CommunitySortOrder",
    "Karma",
    "PostSortOrder",
    "PostType",
    "Slug",
    "ThreadSortOrder",
    "Username",
    "VotableType",
    "VoteTally",
    "VoteValue",
]
