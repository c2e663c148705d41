"""Strongly typed identifiers for forum domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
CommunityId = NewType("CommunityId", UUID)
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)
