"""Unit tests for KarmaLedger."""

import pytest

from forum.domain.repository import UserRepository
from forum.domain.service import KarmaLedger
from forum.domain.value import VotableType, VoteValue
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

UP, DOWN = VoteValue.UP, VoteValue.DOWN


@pytest.mark.parametrize(
    "old,new,expected",
    [
        (None, UP, 1),
        (None, DOWN, -1),
        (UP, DOWN, -2),
        (DOWN, UP, 2),
        (UP, None, -1),
        (DOWN, None, 1),
        (UP, UP, 0),
        (None, None, 0),
    ],
)
def test_delta(old, new, expected):
    """Net change of one ledger mutation."""
    assert KarmaLedger.delta(old, new) == expected


@pytest.mark.asyncio
async def test_record_updates_bucket_and_total(unit_env):
    """Post votes move post karma and the total together."""
    karma_ledger = await unit_env.get(KarmaLedger)
    user_repo = await unit_env.get(UserRepository)
    author = await make_user(unit_env, "author")

    await karma_ledger.record(author.id, VotableType.POST, old=None, new=UP)
    await karma_ledger.record(author.id, VotableType.COMMENT, old=UP, new=DOWN)

    stored = await user_repo.find_by_id(author.id)
    assert stored.karma.post == 1
    assert stored.karma.comment == -2
    assert stored.karma.total == -1


@pytest.mark.asyncio
async def test_record_without_change_skips_write(unit_env, monkeypatch):
    """A zero delta doesn't touch the user."""
    karma_ledger = await unit_env.get(KarmaLedger)
    author = await make_user(unit_env, "author")

    async def fail(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(karma_ledger.user_repository, "apply_karma_delta", fail)

    assert await karma_ledger.record(author.id, VotableType.POST, UP, UP) == 0
