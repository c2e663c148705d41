"""Domain services."""

from .aggregate_maintainer import AggregateMaintainer
from .base import Service
from .comment_service import CommentService, ThreadComment
from .community_service import CommunityService
from .karma_ledger import KarmaLedger
from .post_service import PostService
from .user_service import KarmaSummary, UserService
from .vote_service import VoteService

__all__ = [
    "AggregateMaintainer",
    "CommentService",
    "CommunityService",
    "KarmaLedger",
    "KarmaSummary",
    "PostService",
    "Service",
    "ThreadComment",
    "UserService",
    "VoteService",
]
