"""Post routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from forum.application.usecase.post import (
    CreatePostRequest,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostUseCase,
    GetPostRequest,
    GetPostUseCase,
    ListPostsRequest,
    ListPostsResponse,
    ListPostsUseCase,
    ModeratePostRequest,
    ModeratePostUseCase,
    PostResponse,
    RecomputeHotScoreRequest,
    RecomputeHotScoreResponse,
    RecomputeHotScoreUseCase,
    UpdatePostRequest,
    UpdatePostUseCase,
)
from forum.domain.value import PostSortOrder, PostType
from forum.interface.api.dependencies import get_current_user_id, get_optional_user_id

router = APIRouter(prefix="/posts", tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    community: str  # Community slug
    title: str = Field(min_length=3, max_length=300)
    content: str | None = Field(default=None, max_length=40000)
    type: PostType = PostType.TEXT
    url: str | None = None
    nsfw: bool = False
    spoiler: bool = False


class UpdatePostAPIRequest(BaseModel):
    """API request for editing a post. Omitted fields are kept."""

    title: str | None = Field(default=None, min_length=3, max_length=300)
    content: str | None = Field(default=None, max_length=40000)
    nsfw: bool | None = None
    spoiler: bool | None = None


class ModeratePostAPIRequest(BaseModel):
    """API request for locking or pinning a post."""

    locked: bool | None = None
    pinned: bool | None = None


class RecomputeHotScoreAPIRequest(BaseModel):
    """API request for recomputing a hot score."""

    now: datetime | None = None


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    user_id: str = Depends(get_current_user_id),
) -> PostResponse:
    """Create a post in a community.

    Link, image and video posts must carry a URL.
    """
    return await create_post_use_case.execute(
        CreatePostRequest(
            community=request.community,
            title=request.title,
            content=request.content,
            type=request.type,
            url=request.url,
            nsfw=request.nsfw,
            spoiler=request.spoiler,
            author_id=user_id,
        )
    )


@router.get("", response_model=ListPostsResponse)
async def list_posts(
    list_posts_use_case: FromDishka[ListPostsUseCase],
    community: Optional[str] = Query(default=None),
    author_id: Optional[UUID] = Query(default=None),
    sort: PostSortOrder = Query(default=PostSortOrder.HOT),
    limit: int = Query(default=25, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    viewer_id: str | None = Depends(get_optional_user_id),
) -> ListPostsResponse:
    """List posts by hot, new, top or controversial."""
    return await list_posts_use_case.execute(
        ListPostsRequest(
            community=community,
            author_id=str(author_id) if author_id else None,
            sort=sort,
            limit=limit,
            offset=offset,
            viewer_id=viewer_id,
        )
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    get_post_use_case: FromDishka[GetPostUseCase],
    viewer_id: str | None = Depends(get_optional_user_id),
) -> PostResponse:
    """Get a post by ID."""
    return await get_post_use_case.execute(
        GetPostRequest(post_id=str(post_id), viewer_id=viewer_id)
    )


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    request: UpdatePostAPIRequest,
    update_post_use_case: FromDishka[UpdatePostUseCase],
    user_id: str = Depends(get_current_user_id),
) -> PostResponse:
    """Edit a post's title, content or flags. Only the author may edit."""
    return await update_post_use_case.execute(
        UpdatePostRequest(
            post_id=str(post_id),
            user_id=user_id,
            title=request.title,
            content=request.content,
            nsfw=request.nsfw,
            spoiler=request.spoiler,
        )
    )


@router.patch("/{post_id}/moderation", response_model=PostResponse)
async def moderate_post(
    post_id: UUID,
    request: ModeratePostAPIRequest,
    moderate_post_use_case: FromDishka[ModeratePostUseCase],
    user_id: str = Depends(get_current_user_id),
) -> PostResponse:
    """Lock or pin a post. Only moderators of its community may do this."""
    return await moderate_post_use_case.execute(
        ModeratePostRequest(
            post_id=str(post_id),
            moderator_id=user_id,
            locked=request.locked,
            pinned=request.pinned,
        )
    )


@router.delete("/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: UUID,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    user_id: str = Depends(get_current_user_id),
) -> PostResponse:
    """Soft-delete a post. Only the author may delete."""
    return await delete_post_use_case.execute(
        DeletePostRequest(post_id=str(post_id), user_id=user_id)
    )


@router.post("/{post_id}/hot-score", response_model=RecomputeHotScoreResponse)
async def recompute_hot_score(
    post_id: UUID,
    recompute_hot_score_use_case: FromDishka[RecomputeHotScoreUseCase],
    request: RecomputeHotScoreAPIRequest | None = None,
) -> RecomputeHotScoreResponse:
    """Recompute a post's aggregates and hot score."""
    return await recompute_hot_score_use_case.execute(
        RecomputeHotScoreRequest(
            post_id=str(post_id), now=request.now if request else None
        )
    )
