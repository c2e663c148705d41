"""Vote entity.

Each voter holds at most one vote per target. Changing direction updates
the existing row instead of adding another one.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from forum.domain.model.common import DomainModel, utc_now
from forum.domain.value import UserId, VotableType, VoteValue


class Vote(DomainModel):
    """A single up or down vote.

    Identity is the composite ``(voter_id, target_type, target_id)``.
    ``target_id`` references either a post or a comment depending on
    ``target_type``; there is no foreign key to a single table.
    """

    voter_id: UserId
    target_type: VotableType
    target_id: UUID  # PostId or CommentId (both are UUIDs)
    value: VoteValue
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
