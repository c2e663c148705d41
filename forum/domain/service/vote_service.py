"""Vote domain service."""

from typing import Awaitable, Callable, Optional, Sequence, TypeVar
from uuid import UUID

import logfire

from forum.domain.error import (
    ConcurrentUpdateConflict,
    ContentDeletedException,
    InvalidVoteValue,
    TargetNotFound,
)
from forum.domain.model import Comment, Post, Vote
from forum.domain.model.common import utc_now
from forum.domain.repository import (
    CommentRepository,
    PostRepository,
    UnitOfWork,
    VoteRepository,
)
from forum.domain.value import (
    CommentId,
    PostId,
    UserId,
    VotableType,
    VoteTally,
    VoteValue,
)

from .aggregate_maintainer import AggregateMaintainer
from .base import Service
from .karma_ledger import KarmaLedger

T = TypeVar("T")


class VoteService(Service):
    """Domain service for the vote ledger.

    Each cast or removal runs as one unit of work: lock the target row,
    write the ledger, recount the target's aggregates, adjust the author's
    karma. Conflicting transactions are retried up to ``max_attempts``
    times.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        aggregate_maintainer: AggregateMaintainer,
        karma_ledger: KarmaLedger,
        unit_of_work: UnitOfWork,
        max_attempts: int = 3,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            post_repository: Post repository
            comment_repository: Comment repository
            aggregate_maintainer: Recomputes target aggregates
            karma_ledger: Adjusts author karma
            unit_of_work: Atomic scope for each vote mutation
            max_attempts: Attempts before a conflict is surfaced
        """
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository
        self.aggregate_maintainer = aggregate_maintainer
        self.karma_ledger = karma_ledger
        self.unit_of_work = unit_of_work
        self.max_attempts = max_attempts

    async def cast_vote(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
        value: int,
    ) -> VoteTally:
        """Cast or change a vote.

        Casting the value the voter already holds changes nothing. Casting
        the opposite value updates the existing ledger row.

        Args:
            voter_id: Voter
            target_type: Post or comment
            target_id: ID of the target
            value: +1 or -1

        Returns:
            The target's tally after the vote

        Raises:
            InvalidVoteValue: If value is not +1 or -1
            TargetNotFound: If the target doesn't exist
            ContentDeletedException: If the target is soft-deleted
            ConcurrentUpdateConflict: If retries are exhausted
        """
        vote_value = self._parse_value(value)

        with logfire.span(
            "vote_service.cast_vote",
            voter_id=str(voter_id),
            target_type=target_type.value,
            target_id=str(target_id),
            value=int(vote_value),
        ):
            return await self._with_retry(
                "cast_vote",
                lambda: self._cast(voter_id, target_type, target_id, vote_value),
            )

    async def remove_vote(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> VoteTally:
        """Remove a voter's vote. Removing a vote that doesn't exist is a no-op.

        Votes can be withdrawn from soft-deleted targets.

        Raises:
            TargetNotFound: If the target doesn't exist
            ConcurrentUpdateConflict: If retries are exhausted
        """
        with logfire.span(
            "vote_service.remove_vote",
            voter_id=str(voter_id),
            target_type=target_type.value,
            target_id=str(target_id),
        ):
            return await self._with_retry(
                "remove_vote",
                lambda: self._remove(voter_id, target_type, target_id),
            )

    async def get_user_votes(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_ids: Sequence[UUID],
    ) -> dict[UUID, VoteValue]:
        """Map each target the voter has voted on to the vote value.

        Args:
            voter_id: Voter
            target_type: Type of the targets
            target_ids: Targets to look up

        Returns:
            Target ID to vote value, for targets with a vote only
        """
        if not target_ids:
            return {}

        # Batch query to fetch all votes at once (avoid N+1)
        votes = await self.vote_repository.find_by_voter_and_targets(
            voter_id=voter_id,
            target_type=target_type,
            target_ids=target_ids,
        )
        return {vote.target_id: vote.value for vote in votes}

    @staticmethod
    def _parse_value(value: int) -> VoteValue:
        # bool is an int subclass; True must not pass as +1
        if isinstance(value, bool) or value not in (1, -1):
            logfire.warn("Invalid vote value", value=repr(value))
            raise InvalidVoteValue(value)
        return VoteValue(value)

    async def _with_retry(
        self, operation: str, attempt: Callable[[], Awaitable[T]]
    ) -> T:
        attempt_number = 1
        while True:
            try:
                return await attempt()
            except ConcurrentUpdateConflict as e:
                if attempt_number >= self.max_attempts:
                    logfire.error(
                        "Vote conflict retries exhausted",
                        operation=operation,
                        attempts=attempt_number,
                        error=str(e),
                    )
                    raise
                logfire.warn(
                    "Vote conflict, retrying",
                    operation=operation,
                    attempt=attempt_number,
                    error=str(e),
                )
                attempt_number += 1

    async def _lock_target(
        self, target_type: VotableType, target_id: UUID
    ) -> Post | Comment:
        target: Optional[Post | Comment]
        if target_type == VotableType.POST:
            target = await self.post_repository.lock(PostId(target_id))
        else:
            target = await self.comment_repository.lock(CommentId(target_id))

        if target is None:
            logfire.warn(
                "Vote on non-existent target",
                target_type=target_type.value,
                target_id=str(target_id),
            )
            raise TargetNotFound(target_type.value.capitalize(), str(target_id))
        return target

    async def _cast(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
        value: VoteValue,
    ) -> VoteTally:
        async with self.unit_of_work.atomic():
            target = await self._lock_target(target_type, target_id)
            if target.deleted:
                raise ContentDeletedException(target_type.value, str(target_id))

            existing = await self.vote_repository.find(voter_id, target_type, target_id)
            if existing is not None and existing.value == value:
                logfire.info(
                    "Vote unchanged",
                    voter_id=str(voter_id),
                    target_id=str(target_id),
                )
                return target.tally

            now = utc_now()
            await self.vote_repository.upsert(
                Vote(
                    voter_id=voter_id,
                    target_type=target_type,
                    target_id=target_id,
                    value=value,
                    created_at=existing.created_at if existing else now,
                    updated_at=now,
                )
            )
            tally = await self.aggregate_maintainer.recompute(target_type, target, now=now)
            await self.karma_ledger.record(
                target.author_id,
                target_type,
                old=existing.value if existing else None,
                new=value,
            )

            logfire.info(
                "Vote recorded",
                voter_id=str(voter_id),
                target_id=str(target_id),
                value=int(value),
                changed=existing is not None,
                score=tally.score,
            )
            return tally

    async def _remove(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> VoteTally:
        async with self.unit_of_work.atomic():
            target = await self._lock_target(target_type, target_id)

            removed = await self.vote_repository.delete(voter_id, target_type, target_id)
            if removed is None:
                logfire.info(
                    "No vote to remove",
                    voter_id=str(voter_id),
                    target_id=str(target_id),
                )
                return target.tally

            tally = await self.aggregate_maintainer.recompute(target_type, target)
            await self.karma_ledger.record(
                target.author_id, target_type, old=removed.value, new=None
            )

            logfire.info(
                "Vote removed",
                voter_id=str(voter_id),
                target_id=str(target_id),
                score=tally.score,
            )
            return tally
