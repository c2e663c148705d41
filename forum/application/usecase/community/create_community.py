"""Create community use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.model import Community
from forum.domain.service import CommunityService, UserService
from forum.domain.value import Slug, UserId


class CreateCommunityRequest(BaseModel):
    """Create community request."""

    slug: Slug
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    creator_id: str  # User ID from the identity header


class CommunityResponse(BaseModel):
    """A single community."""

    community_id: str
    slug: str
    name: str
    description: str | None
    moderators: list[str]
    member_count: int
    post_count: int
    last_activity: datetime | None
    created_at: datetime
    is_member: bool | None = None  # Only when a viewer is known


def to_community_response(
    community: Community, is_member: bool | None = None
) -> CommunityResponse:
    """Build the response model of a community."""
    return CommunityResponse(
        community_id=str(community.id),
        slug=community.slug.root,
        name=community.name,
        description=community.description,
        moderators=[str(m) for m in community.moderators],
        member_count=community.member_count,
        post_count=community.post_count,
        last_activity=community.last_activity,
        created_at=community.created_at,
        is_member=is_member,
    )


class CreateCommunityUseCase(BaseUseCase):
    """Use case for creating a community."""

    def __init__(
        self, community_service: CommunityService, user_service: UserService
    ) -> None:
        """Initialize create community use case.

        Args:
            community_service: Community domain service
            user_service: User domain service
        """
        self.community_service = community_service
        self.user_service = user_service

    async def execute(self, request: CreateCommunityRequest) -> CommunityResponse:
        """Execute create community flow.

        Raises:
            NotFoundError: If the creator isn't registered
            AlreadyExistsError: If the slug or name is taken
        """
        creator_id = UserId(UUID(request.creator_id))
        await self.user_service.get_by_id(creator_id)

        community = await self.community_service.create_community(
            creator_id=creator_id,
            name=request.name,
            slug=request.slug,
            description=request.description,
        )
        return to_community_response(community)
