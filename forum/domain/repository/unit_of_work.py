"""Unit of work interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    """Atomic scope for multi-row writes.

    Everything written through repositories inside ``atomic()`` is applied
    together or not at all. Row locks taken inside the block are held until
    the enclosing transaction finishes.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic block.

        Usage:
            async with unit_of_work.atomic():
                ...

        Raises:
            ConcurrentUpdateConflict: If the block lost a serialization
                race or deadlocked with another writer
        """
        pass
