"""Mock persistence providers for testing."""

from dishka import Scope, provide

from forum.domain.repository import (
    CommentRepository,
    CommunityRepository,
    PostRepository,
    UnitOfWork,
    UserRepository,
    VoteRepository,
)
from forum.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryCommunityRepository,
    InMemoryPostRepository,
    InMemoryStore,
    InMemoryUnitOfWork,
    InMemoryUserRepository,
    InMemoryVoteRepository,
)
from forum.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    The store is APP-scoped so data survives across requests of one
    container (e2e tests). Each test builds a new container, so tests stay
    isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_store(self) -> InMemoryStore:
        """Provide the shared in-memory tables."""
        return InMemoryStore()

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, store: InMemoryStore) -> UnitOfWork:
        """Provide in-memory unit of work."""
        return InMemoryUnitOfWork(store)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, store: InMemoryStore) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_community_repository(self, store: InMemoryStore) -> CommunityRepository:
        """Provide in-memory community repository."""
        return InMemoryCommunityRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_post_repository(self, store: InMemoryStore) -> PostRepository:
        """Provide in-memory post repository."""
        return InMemoryPostRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, store: InMemoryStore) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_vote_repository(self, store: InMemoryStore) -> VoteRepository:
        """Provide in-memory vote repository."""
        return InMemoryVoteRepository(store)
