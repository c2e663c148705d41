"""PostgreSQL unit of work."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.domain.error import ConcurrentUpdateConflict
from forum.domain.repository import UnitOfWork

# serialization_failure, deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(error: DBAPIError) -> str | None:
    """Extract the SQLSTATE from a wrapped driver error.

    asyncpg errors reach SQLAlchemy through its DBAPI adapter, which keeps
    the original asyncpg exception as ``__cause__``.
    """
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(
            candidate, "pgcode", None
        )
        if code:
            return code
    return None


class PostgresUnitOfWork(UnitOfWork):
    """Unit of work backed by a SAVEPOINT in the request's session.

    The request-scoped session commits when the request finishes, so row
    locks taken inside ``atomic()`` are held until then.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize unit of work.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            async with self.session.begin_nested():
                yield
        except DBAPIError as e:
            if _sqlstate(e) in CONFLICT_SQLSTATES:
                logfire.warn("Concurrent update conflict", sqlstate=_sqlstate(e))
                raise ConcurrentUpdateConflict(str(e.orig)) from e
            raise
