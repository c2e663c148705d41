"""Shared state for the in-memory repositories."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from forum.domain.model import Comment, Community, Membership, Post, User, Vote
from forum.domain.value import (
    CommentId,
    CommunityId,
    PostId,
    UserId,
    VotableType,
)

VoteKey = tuple[UserId, VotableType, UUID]


@dataclass
class InMemoryStore:
    """Tables of the in-memory backend.

    Domain models are immutable, so a shallow copy of every dict is a full
    snapshot of the store. ``lock`` serializes units of work the way row
    locks do in PostgreSQL.
    """

    users: dict[UserId, User] = field(default_factory=dict)
    communities: dict[CommunityId, Community] = field(default_factory=dict)
    memberships: dict[tuple[CommunityId, UserId], Membership] = field(
        default_factory=dict
    )
    posts: dict[PostId, Post] = field(default_factory=dict)
    comments: dict[CommentId, Comment] = field(default_factory=dict)
    votes: dict[VoteKey, Vote] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    owner: Optional[asyncio.Task[Any]] = None

    def snapshot(self) -> dict[str, dict[Any, Any]]:
        return {
            "users": dict(self.users),
            "communities": dict(self.communities),
            "memberships": dict(self.memberships),
            "posts": dict(self.posts),
            "comments": dict(self.comments),
            "votes": dict(self.votes),
        }

    def restore(self, snapshot: dict[str, dict[Any, Any]]) -> None:
        for name, table in snapshot.items():
            setattr(self, name, table)
