"""Ranking functions for posts.

Both functions are pure; the aggregate maintainer stores their results so
listings can order by precomputed columns.
"""

import math
from datetime import datetime

HOT_SCORE_DECAY_SECONDS = 45000.0


def hot_score(
    upvotes: int,
    downvotes: int,
    created_at: datetime,
    now: datetime,
    decay_seconds: float = HOT_SCORE_DECAY_SECONDS,
) -> float:
    """Time-decayed popularity score.

    ``log10(max(|s|, 1)) * sign(s) + age_seconds / decay_seconds`` where
    ``s = upvotes - downvotes`` and ``age_seconds = now - created_at``.

    ``now`` is an explicit reference point so that stored scores are
    comparable snapshots. A clock running behind ``created_at`` counts as
    zero age.

    Args:
        upvotes: Number of +1 votes
        downvotes: Number of -1 votes
        created_at: When the post was created
        now: Reference time the score is computed for
        decay_seconds: Divisor of the age term

    Returns:
        Hot score
    """
    s = upvotes - downvotes
    sign = (s > 0) - (s < 0)
    order = math.log10(max(abs(s), 1))
    age_seconds = max((now - created_at).total_seconds(), 0.0)
    return order * sign + age_seconds / decay_seconds


def controversy_score(upvotes: int, downvotes: int) -> float:
    """How evenly and how heavily an item is contested.

    ``(upvotes + downvotes) ** balance`` with ``balance`` the ratio of the
    smaller side to the larger one. One-sided items score 0; a perfectly
    split item scores its total vote count.
    """
    if upvotes <= 0 or downvotes <= 0:
        return 0.0

    magnitude = upvotes + downvotes
    balance = downvotes / upvotes if upvotes > downvotes else upvotes / downvotes
    return float(magnitude**balance)
