"""Cast vote use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import UserService, VoteService
from forum.domain.value import UserId, VotableType


class CastVoteRequest(BaseModel):
    """Cast vote request."""

    target_type: VotableType
    target_id: str  # UUID string
    voter_id: str  # User ID from the identity header
    value: int | bool | float  # Passed through as sent; checked by the vote service


class VoteResponse(BaseModel):
    """Target tally after a vote change."""

    target_type: VotableType
    target_id: str
    score: int
    upvotes: int
    downvotes: int
    user_vote: int | None


class CastVoteUseCase(BaseUseCase):
    """Use case for upvoting or downvoting a post or comment."""

    def __init__(self, vote_service: VoteService, user_service: UserService) -> None:
        """Initialize cast vote use case.

        Args:
            vote_service: Vote domain service
            user_service: User domain service (verifies the voter exists)
        """
        self.vote_service = vote_service
        self.user_service = user_service

    async def execute(self, request: CastVoteRequest) -> VoteResponse:
        """Execute cast vote flow.

        Raises:
            NotFoundError: If the voter isn't registered
            InvalidVoteValue: If value is not +1 or -1
            TargetNotFound: If the target doesn't exist
            ContentDeletedException: If the target is deleted
            ConcurrentUpdateConflict: If retries are exhausted
        """
        voter_id = UserId(UUID(request.voter_id))
        await self.user_service.get_by_id(voter_id)

        tally = await self.vote_service.cast_vote(
            voter_id=voter_id,
            target_type=request.target_type,
            target_id=UUID(request.target_id),
            value=request.value,
        )

        return VoteResponse(
            target_type=request.target_type,
            target_id=request.target_id,
            score=tally.score,
            upvotes=tally.upvotes,
            downvotes=tally.downvotes,
            user_vote=int(request.value),
        )
