"""Vote routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from forum.application.usecase.vote import (
    CastVoteRequest,
    CastVoteUseCase,
    RemoveVoteRequest,
    RemoveVoteUseCase,
    VoteResponse,
)
from forum.domain.value import VotableType
from forum.interface.api.dependencies import get_current_user_id

router = APIRouter(tags=["votes"], route_class=DishkaRoute)


class CastVoteAPIRequest(BaseModel):
    """API request for casting a vote.

    ``value`` is passed through as sent; anything other than 1 or -1 is
    rejected by the vote service.
    """

    value: int | bool | float


async def _cast(
    use_case: CastVoteUseCase,
    target_type: VotableType,
    target_id: UUID,
    voter_id: str,
    value: int | bool | float,
) -> VoteResponse:
    return await use_case.execute(
        CastVoteRequest(
            target_type=target_type,
            target_id=str(target_id),
            voter_id=voter_id,
            value=value,
        )
    )


@router.post("/posts/{post_id}/vote", response_model=VoteResponse)
async def vote_post(
    post_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    user_id: str = Depends(get_current_user_id),
) -> VoteResponse:
    """Upvote (1) or downvote (-1) a post. Repeating a vote is a no-op."""
    return await _cast(
        cast_vote_use_case, VotableType.POST, post_id, user_id, request.value
    )


@router.delete("/posts/{post_id}/vote", response_model=VoteResponse)
async def remove_post_vote(
    post_id: UUID,
    remove_vote_use_case: FromDishka[RemoveVoteUseCase],
    user_id: str = Depends(get_current_user_id),
) -> VoteResponse:
    """Remove the caller's vote from a post."""
    return await remove_vote_use_case.execute(
        RemoveVoteRequest(
            target_type=VotableType.POST, target_id=str(post_id), voter_id=user_id
        )
    )


@router.post("/comments/{comment_id}/vote", response_model=VoteResponse)
async def vote_comment(
    comment_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    user_id: str = Depends(get_current_user_id),
) -> VoteResponse:
    """Upvote (1) or downvote (-1) a comment. Repeating a vote is a no-op."""
    return await _cast(
        cast_vote_use_case, VotableType.COMMENT, comment_id, user_id, request.value
    )


@router.delete("/comments/{comment_id}/vote", response_model=VoteResponse)
async def remove_comment_vote(
    comment_id: UUID,
    remove_vote_use_case: FromDishka[RemoveVoteUseCase],
    user_id: str = Depends(get_current_user_id),
) -> VoteResponse:
    """Remove the caller's vote from a comment."""
    return await remove_vote_use_case.execute(
        RemoveVoteRequest(
            target_type=VotableType.COMMENT,
            target_id=str(comment_id),
            voter_id=user_id,
        )
    )
