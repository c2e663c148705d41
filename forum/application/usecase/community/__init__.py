"""Community use cases."""

from .create_community import (
    CommunityResponse,
    CreateCommunityRequest,
    CreateCommunityUseCase,
)
from .get_community import GetCommunityRequest, GetCommunityUseCase
from .list_communities import (
    ListCommunitiesRequest,
    ListCommunitiesResponse,
    ListCommunitiesUseCase,
)
from .membership import MembershipRequest, MembershipResponse, MembershipUseCase

__all__ = [
    "CommunityResponse",
    "CreateCommunityRequest",
    "CreateCommunityUseCase",
    "GetCommunityRequest",
    "GetCommunityUseCase",
    "ListCommunitiesRequest",
    "ListCommunitiesResponse",
    "ListCommunitiesUseCase",
    "MembershipRequest",
    "MembershipResponse",
    "MembershipUseCase",
]
