"""PostgreSQL implementation of Vote repository."""

from typing import List, Optional, Sequence
from uuid import UUID

import logfire
from sqlalchemy import case, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.error import DuplicateVote
from forum.domain.model import Vote
from forum.domain.repository import VoteRepository
from forum.domain.value import UserId, VotableType
from forum.persistence.mappers import row_to_vote, vote_to_dict
from forum.persistence.tables import votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _key(self, voter_id: UserId, target_type: VotableType, target_id: UUID):
        return (
            (votes_table.c.voter_id == voter_id)
            & (votes_table.c.target_type == target_type.value)
            & (votes_table.c.target_id == target_id)
        )

    async def find(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Find a voter's vote on a target."""
        stmt = select(votes_table).where(self._key(voter_id, target_type, target_id))
        result = await self.session.execute(stmt)
        rows = result.fetchall()
        if len(rows) > 1:
            raise DuplicateVote(str(voter_id), target_type.value, str(target_id))
        return row_to_vote(rows[0]._asdict()) if rows else None

    async def upsert(self, vote: Vote) -> Vote:
        """Insert a vote or switch the value of the existing row."""
        with logfire.span(
            "vote_repository.upsert",
            voter_id=str(vote.voter_id),
            target_type=vote.target_type.value,
            target_id=str(vote.target_id),
            value=int(vote.value),
        ):
            stmt = insert(votes_table).values(**vote_to_dict(vote))
            stmt = stmt.on_conflict_do_update(
                constraint="pk_votes",
                set_={
                    "value": stmt.excluded.value,
                    "updated_at": stmt.excluded.updated_at,
                },
            ).returning(votes_table)

            result = await self.session.execute(stmt)
            row = result.fetchone()
            await self.session.flush()
            return row_to_vote(row._asdict())

    async def delete(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_id: UUID,
    ) -> Optional[Vote]:
        """Delete a voter's vote on a target."""
        stmt = (
            votes_table.delete()
            .where(self._key(voter_id, target_type, target_id))
            .returning(votes_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_vote(row._asdict()) if row else None

    async def tally(self, target_type: VotableType, target_id: UUID) -> tuple[int, int]:
        """Count up and down votes on a target."""
        stmt = select(
            func.count(case((votes_table.c.value == 1, 1))),
            func.count(case((votes_table.c.value == -1, 1))),
        ).where(
            (votes_table.c.target_type == target_type.value)
            & (votes_table.c.target_id == target_id)
        )
        result = await self.session.execute(stmt)
        upvotes, downvotes = result.one()
        return int(upvotes), int(downvotes)

    async def find_by_voter_and_targets(
        self,
        voter_id: UserId,
        target_type: VotableType,
        target_ids: Sequence[UUID],
    ) -> List[Vote]:
        """Find a voter's votes on multiple targets (batch query)."""
        if not target_ids:
            return []

        stmt = select(votes_table).where(
            (votes_table.c.voter_id == voter_id)
            & (votes_table.c.target_type == target_type.value)
            & (votes_table.c.target_id.in_(list(target_ids)))
        )
        result = await self.session.execute(stmt)
        return [row_to_vote(row._asdict()) for row in result.fetchall()]
