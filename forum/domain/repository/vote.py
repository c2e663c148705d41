"""Vote repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from forum.domain.model.vote import Vote
from forum.domain.value import UserId, VotableType


class VoteRepository(ABC):
    """Repository for the vote ledger.

    Rows are keyed by ``(voter_id, target_type, target_id)``; the storage
    layer guarantees at most one row per key.
    """

    @abstractmethod
    async def find(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Find a voter's vote on a target.

        Args:
            voter_id: The voter's ID
            target_type: Type of target (post or comment)
            target_id: ID of the target

        Returns:
            The vote if found, None otherwise

        Raises:
            DuplicateVote: If more than one row exists for the key
        """
        pass

    @abstractmethod
    async def upsert(self, vote: Vote) -> Vote:
        """Insert a vote, or update the value of the existing row for its key.

        Args:
            vote: The vote to store

        Returns:
            The stored vote
        """
        pass

    @abstractmethod
    async def delete(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Delete a voter's vote on a target.

        Returns:
            The deleted vote, or None if no vote existed
        """
        pass

    @abstractmethod
    async def tally(self, target_type: VotableType, target_id: UUID) -> tuple[int, int]:
        """Count a target's votes straight from the ledger.

        Returns:
            ``(upvotes, downvotes)``
        """
        pass

    @abstractmethod
    async def find_by_voter_and_targets(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a voter's votes on multiple targets (batch query).

        Args:
            voter_id: The voter's ID
            target_type: Type of targets
            target_ids: Target IDs to check

        Returns:
            Votes by the voter on the given targets
        """
        pass
