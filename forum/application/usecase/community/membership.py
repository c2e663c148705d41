"""Community membership use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import CommunityService, UserService
from forum.domain.value import Slug, UserId


class MembershipRequest(BaseModel):
    """Join or leave request."""

    slug: Slug
    user_id: str  # User ID from the identity header
    join: bool  # False to leave


class MembershipResponse(BaseModel):
    """Membership state after the request."""

    slug: str
    user_id: str
    member: bool
    changed: bool
    member_count: int


class MembershipUseCase(BaseUseCase):
    """Use case for joining and leaving communities.

    Both directions are idempotent: repeating a join or a leave leaves
    ``member_count`` unchanged.
    """

    def __init__(
        self, community_service: CommunityService, user_service: UserService
    ) -> None:
        """Initialize membership use case.

        Args:
            community_service: Community domain service
            user_service: User domain service
        """
        self.community_service = community_service
        self.user_service = user_service

    async def execute(self, request: MembershipRequest) -> MembershipResponse:
        """Execute join or leave.

        Raises:
            NotFoundError: If the user or community doesn't exist
        """
        user_id = UserId(UUID(request.user_id))
        await self.user_service.get_by_id(user_id)

        if request.join:
            community, changed = await self.community_service.join(
                request.slug, user_id
            )
        else:
            community, changed = await self.community_service.leave(
                request.slug, user_id
            )

        return MembershipResponse(
            slug=community.slug.root,
            user_id=request.user_id,
            member=request.join,
            changed=changed,
            member_count=community.member_count,
        )
