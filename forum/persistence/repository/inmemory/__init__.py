"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .community import InMemoryCommunityRepository
from .post import InMemoryPostRepository
from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryCommunityRepository",
    "InMemoryPostRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
    "InMemoryVoteRepository",
]
