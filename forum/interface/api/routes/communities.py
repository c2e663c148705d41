"""Community routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from forum.application.usecase.community import (
    CommunityResponse,
    CreateCommunityRequest,
    CreateCommunityUseCase,
    GetCommunityRequest,
    GetCommunityUseCase,
    ListCommunitiesRequest,
    ListCommunitiesResponse,
    ListCommunitiesUseCase,
    MembershipRequest,
    MembershipResponse,
    MembershipUseCase,
)
from forum.domain.value import CommunitySortOrder, Slug
from forum.interface.api.dependencies import get_current_user_id, get_optional_user_id

router = APIRouter(prefix="/communities", tags=["communities"], route_class=DishkaRoute)


class CreateCommunityAPIRequest(BaseModel):
    """API request for creating a community."""

    slug: Slug
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=2000)


@router.post(
    "",
    response_model=CommunityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_community(
    request: CreateCommunityAPIRequest,
    create_community_use_case: FromDishka[CreateCommunityUseCase],
    user_id: str = Depends(get_current_user_id),
) -> CommunityResponse:
    """Create a community. The caller becomes its moderator and first member."""
    return await create_community_use_case.execute(
        CreateCommunityRequest(
            slug=request.slug,
            name=request.name,
            description=request.description,
            creator_id=user_id,
        )
    )


@router.get("", response_model=ListCommunitiesResponse)
async def list_communities(
    list_communities_use_case: FromDishka[ListCommunitiesUseCase],
    sort: CommunitySortOrder = Query(default=CommunitySortOrder.POPULAR),
    limit: int = Query(default=25, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListCommunitiesResponse:
    """List communities."""
    return await list_communities_use_case.execute(
        ListCommunitiesRequest(sort=sort, limit=limit, offset=offset)
    )


@router.get("/{slug}", response_model=CommunityResponse)
async def get_community(
    slug: str,
    get_community_use_case: FromDishka[GetCommunityUseCase],
    viewer_id: str | None = Depends(get_optional_user_id),
) -> CommunityResponse:
    """Get a community by slug, with the viewer's membership if known."""
    return await get_community_use_case.execute(
        GetCommunityRequest(slug=slug, viewer_id=viewer_id)
    )


@router.put("/{slug}/members", response_model=MembershipResponse)
async def join_community(
    slug: str,
    membership_use_case: FromDishka[MembershipUseCase],
    user_id: str = Depends(get_current_user_id),
) -> MembershipResponse:
    """Join a community. Joining twice is a no-op."""
    return await membership_use_case.execute(
        MembershipRequest(slug=slug, user_id=user_id, join=True)
    )


@router.delete("/{slug}/members", response_model=MembershipResponse)
async def leave_community(
    slug: str,
    membership_use_case: FromDishka[MembershipUseCase],
    user_id: str = Depends(get_current_user_id),
) -> MembershipResponse:
    """Leave a community. Leaving without membership is a no-op."""
    return await membership_use_case.execute(
        MembershipRequest(slug=slug, user_id=user_id, join=False)
    )
