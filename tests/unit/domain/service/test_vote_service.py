"""Unit tests for VoteService."""

import asyncio
from uuid import uuid4

import pytest
import pytest_asyncio

from forum.domain.error import (
    ConcurrentUpdateConflict,
    ContentDeletedException,
    InvalidVoteValue,
    TargetNotFound,
)
from forum.domain.repository import (
    CommentRepository,
    PostRepository,
    UserRepository,
    VoteRepository,
)
from forum.domain.service import KarmaLedger, PostService, VoteService
from forum.domain.value import VotableType, VoteValue
from tests.conftest import make_comment, make_community, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


@pytest_asyncio.fixture
async def seeded(unit_env):
    """An author, a voter and a post by the author."""
    author = await make_user(unit_env, "author")
    voter = await make_user(unit_env, "voter")
    community = await make_community(unit_env, author, "science")
    post = await make_post(unit_env, author, community)
    return author, voter, post


class TestCastVote:
    """Tests for cast_vote."""

    @pytest.mark.asyncio
    async def test_upvote_creates_vote_and_updates_aggregates(self, unit_env, seeded):
        """A first upvote writes the ledger, the post tally and author karma."""
        # Arrange
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        user_repo = await unit_env.get(UserRepository)

        # Act
        tally = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

        # Assert
        assert (tally.score, tally.upvotes, tally.downvotes) == (1, 1, 0)

        vote = await vote_repo.find(voter.id, VotableType.POST, post.id)
        assert vote is not None
        assert vote.value == VoteValue.UP

        stored = await post_repo.find_by_id(post.id)
        assert stored.score == 1
        assert stored.upvotes == 1

        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.post == 1
        assert stored_author.karma.total == 1

    @pytest.mark.asyncio
    async def test_same_vote_twice_is_idempotent(self, unit_env, seeded):
        """Casting the value already held changes nothing."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        user_repo = await unit_env.get(UserRepository)

        first = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)
        second = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

        assert first == second
        assert second.score == 1
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.total == 1

    @pytest.mark.asyncio
    async def test_flip_updates_existing_vote(self, unit_env, seeded):
        """Flipping +1 to -1 keeps one ledger row and moves karma by -2."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        user_repo = await unit_env.get(UserRepository)

        await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)
        tally = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, -1)

        assert (tally.score, tally.upvotes, tally.downvotes) == (-1, 0, 1)
        assert await vote_repo.tally(VotableType.POST, post.id) == (0, 1)
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.post == -1
        assert stored_author.karma.total == -1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 2, -2, True, False, 1.5])
    async def test_invalid_value_rejected(self, unit_env, seeded, value):
        """Only +1 and -1 are votes."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)

        with pytest.raises(InvalidVoteValue):
            await vote_service.cast_vote(voter.id, VotableType.POST, post.id, value)

        assert await vote_repo.find(voter.id, VotableType.POST, post.id) is None

    @pytest.mark.asyncio
    async def test_missing_target_raises(self, unit_env, seeded):
        """Voting on an unknown post or comment raises TargetNotFound."""
        _, voter, _ = seeded
        vote_service = await unit_env.get(VoteService)

        with pytest.raises(TargetNotFound):
            await vote_service.cast_vote(voter.id, VotableType.POST, uuid4(), 1)
        with pytest.raises(TargetNotFound):
            await vote_service.cast_vote(voter.id, VotableType.COMMENT, uuid4(), 1)

    @pytest.mark.asyncio
    async def test_deleted_target_rejected(self, unit_env, seeded):
        """Soft-deleted posts can't receive new votes."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        post_service = await unit_env.get(PostService)
        await post_service.delete_post(post.id, author.id)

        with pytest.raises(ContentDeletedException):
            await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

    @pytest.mark.asyncio
    async def test_comment_vote_updates_comment_karma(self, unit_env, seeded):
        """Comment votes land in the comment karma bucket."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        comment_repo = await unit_env.get(CommentRepository)
        user_repo = await unit_env.get(UserRepository)
        comment = await make_comment(unit_env, author, post.id)

        tally = await vote_service.cast_vote(
            voter.id, VotableType.COMMENT, comment.id, -1
        )

        assert tally.score == -1
        stored = await comment_repo.find_by_id(comment.id)
        assert stored.downvotes == 1
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.comment == -1
        assert stored_author.karma.post == 0
        assert stored_author.karma.total == -1

    @pytest.mark.asyncio
    async def test_vote_refreshes_hot_score(self, unit_env, seeded):
        """Votes store a fresh hot score on the post."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        others = [await make_user(unit_env) for _ in range(9)]

        for user in [voter, *others]:
            await vote_service.cast_vote(user.id, VotableType.POST, post.id, 1)

        stored = await post_repo.find_by_id(post.id)
        # log10(10) plus a small age term
        assert stored.hot_score >= 1.0


class TestRemoveVote:
    """Tests for remove_vote."""

    @pytest.mark.asyncio
    async def test_remove_reverts_aggregates_and_karma(self, unit_env, seeded):
        """Removing a -1 vote restores the score and gives karma back."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        user_repo = await unit_env.get(UserRepository)

        await vote_service.cast_vote(voter.id, VotableType.POST, post.id, -1)
        tally = await vote_service.remove_vote(voter.id, VotableType.POST, post.id)

        assert (tally.score, tally.upvotes, tally.downvotes) == (0, 0, 0)
        assert await vote_repo.find(voter.id, VotableType.POST, post.id) is None
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.total == 0

    @pytest.mark.asyncio
    async def test_remove_without_vote_is_noop(self, unit_env, seeded):
        """Removing a vote that doesn't exist changes nothing."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)

        tally = await vote_service.remove_vote(voter.id, VotableType.POST, post.id)

        assert tally.score == 0

    @pytest.mark.asyncio
    async def test_remove_from_deleted_target_allowed(self, unit_env, seeded):
        """Votes can still be withdrawn after the post is deleted."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        post_service = await unit_env.get(PostService)

        await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)
        await post_service.delete_post(post.id, author.id)
        tally = await vote_service.remove_vote(voter.id, VotableType.POST, post.id)

        assert tally.score == 0

    @pytest.mark.asyncio
    async def test_remove_missing_target_raises(self, unit_env, seeded):
        """Removing a vote on an unknown target raises TargetNotFound."""
        _, voter, _ = seeded
        vote_service = await unit_env.get(VoteService)

        with pytest.raises(TargetNotFound):
            await vote_service.remove_vote(voter.id, VotableType.POST, uuid4())


class TestLedgerConsistency:
    """Aggregates and karma stay equal to what the ledger says."""

    @pytest.mark.asyncio
    async def test_concurrent_votes_are_all_counted(self, unit_env, seeded):
        """Concurrent voters never lose an update."""
        author, _, post = seeded
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        user_repo = await unit_env.get(UserRepository)
        up = [await make_user(unit_env) for _ in range(6)]
        down = [await make_user(unit_env) for _ in range(4)]

        await asyncio.gather(
            *[
                vote_service.cast_vote(u.id, VotableType.POST, post.id, 1)
                for u in up
            ],
            *[
                vote_service.cast_vote(u.id, VotableType.POST, post.id, -1)
                for u in down
            ],
        )

        stored = await post_repo.find_by_id(post.id)
        assert (stored.score, stored.upvotes, stored.downvotes) == (2, 6, 4)
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.post == 2

    @pytest.mark.asyncio
    async def test_score_equals_ledger_sum(self, unit_env, seeded):
        """After a mix of casts, flips and removals, score is the ledger sum."""
        author, _, post = seeded
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        user_repo = await unit_env.get(UserRepository)
        users = [await make_user(unit_env) for _ in range(5)]

        await vote_service.cast_vote(users[0].id, VotableType.POST, post.id, 1)
        await vote_service.cast_vote(users[1].id, VotableType.POST, post.id, 1)
        await vote_service.cast_vote(users[2].id, VotableType.POST, post.id, -1)
        await vote_service.cast_vote(users[1].id, VotableType.POST, post.id, -1)
        await vote_service.cast_vote(users[3].id, VotableType.POST, post.id, 1)
        await vote_service.remove_vote(users[0].id, VotableType.POST, post.id)
        await vote_service.cast_vote(users[4].id, VotableType.POST, post.id, -1)

        upvotes, downvotes = await (await unit_env.get(VoteRepository)).tally(
            VotableType.POST, post.id
        )
        stored = await post_repo.find_by_id(post.id)
        assert stored.score == upvotes - downvotes == -2
        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.post == stored.score

    @pytest.mark.asyncio
    async def test_karma_failure_rolls_back_vote(
        self, unit_env, seeded, monkeypatch
    ):
        """If karma can't be applied, the ledger and aggregates are untouched."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        karma_ledger = await unit_env.get(KarmaLedger)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)

        async def fail(*args, **kwargs):
            raise RuntimeError("karma store unavailable")

        monkeypatch.setattr(karma_ledger.user_repository, "apply_karma_delta", fail)

        with pytest.raises(RuntimeError):
            await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

        assert await vote_repo.find(voter.id, VotableType.POST, post.id) is None
        stored = await post_repo.find_by_id(post.id)
        assert stored.score == 0
        assert stored.upvotes == 0


class TestConflictRetry:
    """Tests for retrying conflicting vote transactions."""

    @pytest.mark.asyncio
    async def test_conflict_is_retried(self, unit_env, seeded, monkeypatch):
        """A single conflict is retried and the vote goes through."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        original_find = vote_repo.find
        calls = []

        async def flaky_find(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise ConcurrentUpdateConflict("could not serialize access")
            return await original_find(*args, **kwargs)

        monkeypatch.setattr(vote_repo, "find", flaky_find)

        tally = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

        assert tally.score == 1
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_conflict_surfaces_after_max_attempts(
        self, unit_env, seeded, monkeypatch
    ):
        """Persistent conflicts escape after max_attempts tries."""
        _, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        post_repo = await unit_env.get(PostRepository)
        calls = []

        async def conflicting_find(*args, **kwargs):
            calls.append(args)
            raise ConcurrentUpdateConflict("deadlock detected")

        monkeypatch.setattr(vote_repo, "find", conflicting_find)

        with pytest.raises(ConcurrentUpdateConflict):
            await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)

        assert len(calls) == vote_service.max_attempts
        stored = await post_repo.find_by_id(post.id)
        assert stored.score == 0


class TestGetUserVotes:
    """Tests for get_user_votes."""

    @pytest.mark.asyncio
    async def test_maps_only_voted_targets(self, unit_env, seeded):
        """Targets without a vote are absent from the map."""
        author, voter, post = seeded
        vote_service = await unit_env.get(VoteService)
        community = await make_community(unit_env, author)
        other = await make_post(unit_env, author, community, title="Other post")

        await vote_service.cast_vote(voter.id, VotableType.POST, post.id, -1)
        votes = await vote_service.get_user_votes(
            voter.id, VotableType.POST, [post.id, other.id]
        )

        assert votes == {post.id: VoteValue.DOWN}

    @pytest.mark.asyncio
    async def test_empty_targets(self, unit_env, seeded):
        """No targets means no lookup."""
        _, voter, _ = seeded
        vote_service = await unit_env.get(VoteService)

        assert await vote_service.get_user_votes(voter.id, VotableType.POST, []) == {}
