"""Aggregate maintainer domain service."""

from datetime import datetime
from typing import Optional

import logfire

from forum.domain.error import TargetNotFound
from forum.domain.model import Comment, Post
from forum.domain.model.common import utc_now
from forum.domain.repository import (
    CommentRepository,
    PostRepository,
    VoteRepository,
)
from forum.domain.value import PostId, VotableType, VoteTally

from .base import Service
from .ranking import HOT_SCORE_DECAY_SECONDS, controversy_score, hot_score


class AggregateMaintainer(Service):
    """Recomputes vote aggregates of posts and comments from the ledger.

    Every recomputation is a full recount rather than a +1/-1 adjustment,
    so the stored aggregates always equal what the ledger says. Callers
    must hold the target's row lock (see ``PostRepository.lock``) inside
    the same unit of work as the ledger write.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        decay_seconds: float = HOT_SCORE_DECAY_SECONDS,
    ) -> None:
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository
        self.decay_seconds = decay_seconds

    async def recompute(
        self,
        target_type: VotableType,
        target: Post | Comment,
        now: Optional[datetime] = None,
    ) -> VoteTally:
        """Recount a target's votes and persist the derived fields.

        Args:
            target_type: Type of target
            target: The locked post or comment
            now: Reference time for the hot score (defaults to current time)

        Returns:
            The target's new tally
        """
        with logfire.span(
            "aggregate_maintainer.recompute",
            target_type=target_type.value,
            target_id=str(target.id),
        ):
            upvotes, downvotes = await self.vote_repository.tally(target_type, target.id)

            updated: Post | Comment
            if target_type == VotableType.POST:
                updated = await self._store_post_aggregates(
                    target, upvotes, downvotes, now or utc_now()
                )
            else:
                updated = await self.comment_repository.update_aggregates(
                    target.id, upvotes=upvotes, downvotes=downvotes
                )

            logfire.info(
                "Aggregates recomputed",
                target_type=target_type.value,
                target_id=str(target.id),
                score=updated.score,
                upvotes=updated.upvotes,
                downvotes=updated.downvotes,
            )
            return updated.tally

    async def refresh_post(
        self, post_id: PostId, now: Optional[datetime] = None
    ) -> Post:
        """Lock a post and recompute its aggregates and hot score for ``now``.

        Idempotent for a fixed ``now``. Used for decay-driven re-ranking of
        posts that receive no new votes.

        Raises:
            TargetNotFound: If the post doesn't exist
        """
        with logfire.span("aggregate_maintainer.refresh_post", post_id=str(post_id)):
            post = await self.post_repository.lock(post_id)
            if post is None:
                logfire.warn("Refresh of non-existent post", post_id=str(post_id))
                raise TargetNotFound("Post", str(post_id))

            upvotes, downvotes = await self.vote_repository.tally(
                VotableType.POST, post.id
            )
            refreshed = await self._store_post_aggregates(
                post, upvotes, downvotes, now or utc_now()
            )
            logfire.info(
                "Post refreshed",
                post_id=str(post_id),
                hot_score=refreshed.hot_score,
            )
            return refreshed

    async def _store_post_aggregates(
        self, post: Post, upvotes: int, downvotes: int, now: datetime
    ) -> Post:
        return await self.post_repository.update_aggregates(
            post.id,
            upvotes=upvotes,
            downvotes=downvotes,
            hot_score=hot_score(
                upvotes, downvotes, post.created_at, now, self.decay_seconds
            ),
            controversy_score=controversy_score(upvotes, downvotes),
        )
