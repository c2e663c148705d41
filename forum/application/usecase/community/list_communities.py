"""List communities use case."""

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import CommunityService
from forum.domain.value import CommunitySortOrder

from .create_community import CommunityResponse, to_community_response


class ListCommunitiesRequest(BaseModel):
    """List communities request."""

    sort: CommunitySortOrder = CommunitySortOrder.POPULAR
    limit: int = Field(default=25, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListCommunitiesResponse(BaseModel):
    """List communities response."""

    communities: list[CommunityResponse]
    sort: CommunitySortOrder


class ListCommunitiesUseCase(BaseUseCase):
    """Use case for browsing communities."""

    def __init__(self, community_service: CommunityService) -> None:
        """Initialize list communities use case.

        Args:
            community_service: Community domain service
        """
        self.community_service = community_service

    async def execute(
        self, request: ListCommunitiesRequest
    ) -> ListCommunitiesResponse:
        communities = await self.community_service.list_communities(
            sort=request.sort, limit=request.limit, offset=request.offset
        )
        return ListCommunitiesResponse(
            communities=[to_community_response(c) for c in communities],
            sort=request.sort,
        )
