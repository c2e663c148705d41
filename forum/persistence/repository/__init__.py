"""PostgreSQL repository implementations."""

from forum.persistence.repository.comment import PostgresCommentRepository
from forum.persistence.repository.community import PostgresCommunityRepository
from forum.persistence.repository.post import PostgresPostRepository
from forum.persistence.repository.unit_of_work import PostgresUnitOfWork
from forum.persistence.repository.user import PostgresUserRepository
from forum.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresCommunityRepository",
    "PostgresPostRepository",
    "PostgresCommentRepository",
    "PostgresVoteRepository",
    "PostgresUnitOfWork",
]
