"""In-memory vote repository for testing."""

from typing import Optional, Sequence
from uuid import UUID

from forum.domain.model.vote import Vote
from forum.domain.repository.vote import VoteRepository
from forum.domain.value import UserId, VotableType, VoteValue

from .store import InMemoryStore


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing.

    Votes are keyed by (voter, target type, target), so the store can't
    hold two votes for the same key.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Find a voter's vote on a target."""
        return self.store.votes.get((voter_id, target_type, target_id))

    async def upsert(self, vote: Vote) -> Vote:
        """Insert a vote or replace the existing one."""
        self.store.votes[(vote.voter_id, vote.target_type, vote.target_id)] = vote
        return vote

    async def delete(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Delete a voter's vote on a target."""
        return self.store.votes.pop((voter_id, target_type, target_id), None)

    async def tally(self, target_type: VotableType, target_id: UUID) -> tuple[int, int]:
        """Count up and down votes on a target."""
        values = [
            v.value
            for v in self.store.votes.values()
            if v.target_type == target_type and v.target_id == target_id
        ]
        return values.count(VoteValue.UP), values.count(VoteValue.DOWN)

    async def find_by_voter_and_targets(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a voter's votes on multiple targets (batch query)."""
        if not target_ids:
            return []

        wanted = set(target_ids)
        return [
            v
            for v in self.store.votes.values()
            if v.voter_id == voter_id
            and v.target_type == target_type
            and v.target_id in wanted
        ]
