"""Get community use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import CommunityService
from forum.domain.value import Slug, UserId

from .create_community import CommunityResponse, to_community_response


class GetCommunityRequest(BaseModel):
    """Get community request."""

    slug: Slug
    viewer_id: str | None = None  # Optional, to include the viewer's membership


class GetCommunityUseCase(BaseUseCase):
    """Use case for reading one community."""

    def __init__(self, community_service: CommunityService) -> None:
        self.community_service = community_service

    async def execute(self, request: GetCommunityRequest) -> CommunityResponse:
        """Raises NotFoundError if no community has the slug."""
        community = await self.community_service.get_by_slug(request.slug)
        is_member = None
        if request.viewer_id:
            is_member = await self.community_service.is_member(
                community.id, UserId(UUID(request.viewer_id))
            )

        return to_community_response(community, is_member)
