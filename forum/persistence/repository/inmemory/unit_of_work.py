"""In-memory unit of work for testing."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from forum.domain.repository import UnitOfWork

from .store import InMemoryStore


class InMemoryUnitOfWork(UnitOfWork):
    """Serializes units of work on the store and rolls back on error.

    Re-entering ``atomic()`` from the task that already holds the store acts
    like a savepoint: only the inner block is rolled back.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        task = asyncio.current_task()
        if self.store.owner is task:
            async with self._savepoint():
                yield
            return

        async with self.store.lock:
            self.store.owner = task
            try:
                async with self._savepoint():
                    yield
            finally:
                self.store.owner = None

    @asynccontextmanager
    async def _savepoint(self) -> AsyncIterator[None]:
        snapshot = self.store.snapshot()
        try:
            yield
        except BaseException:
            self.store.restore(snapshot)
            raise
