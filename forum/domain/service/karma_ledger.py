"""Karma ledger domain service."""

from typing import Optional

import logfire

from forum.domain.repository import UserRepository
from forum.domain.value import UserId, VotableType, VoteValue

from .base import Service


class KarmaLedger(Service):
    """Keeps authors' karma in step with the vote ledger.

    Karma is adjusted incrementally by the net change of each ledger
    mutation and is never re-summed. The only writer of user karma.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize karma ledger.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    @staticmethod
    def delta(old: Optional[VoteValue], new: Optional[VoteValue]) -> int:
        """Net karma change when a vote goes from ``old`` to ``new``.

        ``None`` stands for "no vote": insert of +1 is +1, a flip from +1
        to -1 is -2, removal of a -1 is +1.
        """
        before = int(old) if old is not None else 0
        after = int(new) if new is not None else 0
        return after - before

    async def record(
        self,
        author_id: UserId,
        target_type: VotableType,
        old: Optional[VoteValue],
        new: Optional[VoteValue],
    ) -> int:
        """Apply the karma change of one vote mutation to the target's author.

        Args:
            author_id: Author of the voted post/comment
            target_type: Whether post or comment karma changes
            old: Previous vote value, None if there was no vote
            new: New vote value, None if the vote was removed

        Returns:
            The applied delta
        """
        change = self.delta(old, new)
        if change == 0:
            return 0

        with logfire.span(
            "karma_ledger.record",
            author_id=str(author_id),
            target_type=target_type.value,
            delta=change,
        ):
            await self.user_repository.apply_karma_delta(author_id, target_type, change)
            logfire.info(
                "Karma adjusted",
                author_id=str(author_id),
                target_type=target_type.value,
                delta=change,
            )
            return change
