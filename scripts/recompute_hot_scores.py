#!/usr/bin/env python3
"""Recompute hot scores of recent posts.

Hot scores are stored snapshots, so posts that stop receiving votes keep
the score of their last vote. Run this periodically (e.g. from cron) to
re-rank them against the current time.
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta
from typing import Optional

import logfire
from dishka import AsyncContainer

from forum.config import Settings
from forum.domain.model.common import utc_now
from forum.domain.service import PostService
from forum.util.di.container import create_container
from forum.util.logging import setup_logging
from forum.util.observability import configure_logfire


async def recompute(
    container: AsyncContainer, since: datetime, now: Optional[datetime] = None
) -> int:
    """Refresh every live post created at or after ``since``.

    Every post gets its own request scope, so each refresh commits (and
    releases its row lock) before the next one starts. A failure leaves the
    posts refreshed before it committed.

    Args:
        container: Application container
        since: Oldest creation time to refresh
        now: Reference time shared by the whole run

    Returns:
        Number of posts refreshed
    """
    reference = now or utc_now()
    with logfire.span("recompute_hot_scores", since=since.isoformat()):
        async with container() as request_container:
            post_service = await request_container.get(PostService)
            post_ids = await post_service.find_post_ids_created_since(since)

        for post_id in post_ids:
            async with container() as request_container:
                post_service = await request_container.get(PostService)
                await post_service.recompute_hot_score(post_id, now=reference)

        logfire.info("Hot scores recomputed", count=len(post_ids))
        return len(post_ids)


async def run(hours: float) -> int:
    """Refresh every live post created in the last ``hours`` hours."""
    container = create_container()
    try:
        return await recompute(container, since=utc_now() - timedelta(hours=hours))
    finally:
        await container.close()


def main() -> int:
    """Parse arguments and run the recomputation."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--hours",
        type=float,
        default=48.0,
        help="Only refresh posts created within this many hours (default: 48)",
    )
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    try:
        count = asyncio.run(run(args.hours))
        logfire.info("Hot score recomputation finished", count=count, hours=args.hours)
        return 0

    except Exception as e:
        logfire.error(
            "Hot score recomputation failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
