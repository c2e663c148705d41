"""Recompute hot score use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import PostService
from forum.domain.value import PostId


class RecomputeHotScoreRequest(BaseModel):
    """Recompute hot score request."""

    post_id: str  # UUID string
    now: datetime | None = None  # Reference time, defaults to current time


class RecomputeHotScoreResponse(BaseModel):
    """Recompute hot score response."""

    post_id: str
    hot_score: float
    score: int
    upvotes: int
    downvotes: int


class RecomputeHotScoreUseCase(BaseUseCase):
    """Use case for re-ranking a post whose score decayed without new votes."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize recompute hot score use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(
        self, request: RecomputeHotScoreRequest
    ) -> RecomputeHotScoreResponse:
        """Execute recompute flow. Idempotent for a fixed reference time.

        Raises:
            TargetNotFound: If the post doesn't exist
        """
        post = await self.post_service.recompute_hot_score(
            PostId(UUID(request.post_id)), now=request.now
        )

        return RecomputeHotScoreResponse(
            post_id=str(post.id),
            hot_score=post.hot_score,
            score=post.score,
            upvotes=post.upvotes,
            downvotes=post.downvotes,
        )
