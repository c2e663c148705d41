"""Unit tests for the in-memory unit of work."""

import asyncio
from uuid import uuid4

import pytest

from forum.domain.model.user import User
from forum.domain.value import UserId, Username, VotableType
from forum.persistence.repository.inmemory import (
    InMemoryStore,
    InMemoryUnitOfWork,
    InMemoryUserRepository,
)


def _user(name: str) -> User:
    return User(id=UserId(uuid4()), username=Username(name))


class TestInMemoryUnitOfWork:
    """Rollback and serialization of in-memory units of work."""

    @pytest.mark.asyncio
    async def test_commit_keeps_writes(self):
        """Writes made inside a successful block are kept."""
        store = InMemoryStore()
        uow = InMemoryUnitOfWork(store)
        repo = InMemoryUserRepository(store)
        user = _user("alice")

        async with uow.atomic():
            await repo.create(user)

        assert await repo.find_by_id(user.id) is not None

    @pytest.mark.asyncio
    async def test_error_rolls_back_every_write(self):
        """An exception undoes all writes of the block."""
        store = InMemoryStore()
        uow = InMemoryUnitOfWork(store)
        repo = InMemoryUserRepository(store)
        user = _user("alice")
        await repo.create(user)

        with pytest.raises(RuntimeError):
            async with uow.atomic():
                await repo.apply_karma_delta(user.id, VotableType.POST, 5)
                await repo.create(_user("bob"))
                raise RuntimeError("boom")

        stored = await repo.find_by_id(user.id)
        assert stored.karma.total == 0
        assert len(store.users) == 1

    @pytest.mark.asyncio
    async def test_nested_block_rolls_back_alone(self):
        """A failing inner block acts like a savepoint."""
        store = InMemoryStore()
        uow = InMemoryUnitOfWork(store)
        repo = InMemoryUserRepository(store)
        outer = _user("outer")

        async with uow.atomic():
            await repo.create(outer)
            with pytest.raises(RuntimeError):
                async with uow.atomic():
                    await repo.create(_user("inner"))
                    raise RuntimeError("inner failure")

        assert list(store.users) == [outer.id]

    @pytest.mark.asyncio
    async def test_blocks_are_serialized(self):
        """Concurrent blocks never interleave."""
        store = InMemoryStore()
        uow = InMemoryUnitOfWork(store)
        events = []

        async def work(name: str) -> None:
            async with uow.atomic():
                events.append(f"{name}-start")
                await asyncio.sleep(0)
                events.append(f"{name}-end")

        await asyncio.gather(work("a"), work("b"))

        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )
