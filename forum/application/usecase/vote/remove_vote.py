"""Remove vote use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import VoteService
from forum.domain.value import UserId, VotableType

from .cast_vote import VoteResponse


class RemoveVoteRequest(BaseModel):
    """Remove vote request."""

    target_type: VotableType
    target_id: str  # UUID string
    voter_id: str  # User ID from the identity header


class RemoveVoteUseCase(BaseUseCase):
    """Use case for withdrawing a vote."""

    def __init__(self, vote_service: VoteService) -> None:
        """Initialize remove vote use case.

        Args:
            vote_service: Vote domain service
        """
        self.vote_service = vote_service

    async def execute(self, request: RemoveVoteRequest) -> VoteResponse:
        """Execute remove vote flow. Removing a missing vote is a no-op."""
        tally = await self.vote_service.remove_vote(
            voter_id=UserId(UUID(request.voter_id)),
            target_type=request.target_type,
            target_id=UUID(request.target_id),
        )

        return VoteResponse(
            target_type=request.target_type,
            target_id=request.target_id,
            score=tally.score,
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            user_vote=None,
        )
