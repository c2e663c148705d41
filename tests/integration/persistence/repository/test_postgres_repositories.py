"""Integration tests for the PostgreSQL repositories.

Every test uses fresh random names, so runs don't collide with data left
by earlier runs.
"""

from uuid import uuid4

import pytest

from forum.domain.error import ContentDeletedException
from forum.domain.repository import (
    CommentRepository,
    PostRepository,
    UserRepository,
    VoteRepository,
)
from forum.domain.service import (
    CommentService,
    CommunityService,
    PostService,
    UserService,
    VoteService,
)
from forum.domain.value import PostSortOrder, Slug, VotableType, VoteValue
from tests.conftest import make_comment, make_community, make_post, make_user
from tests.harness import create_env_fixture

# Integration test fixture - real persistence, assumes postgres running
integration_env = create_env_fixture(unmock={"persistence"})

pytestmark = pytest.mark.usefixtures("postgres_available")


class TestVoteLedgerIntegration:
    """Vote ledger against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_cast_flip_remove(self, integration_env):
        """One row per voter; aggregates and karma follow the ledger."""
        # Arrange
        vote_service = await integration_env.get(VoteService)
        vote_repo = await integration_env.get(VoteRepository)
        post_repo = await integration_env.get(PostRepository)
        user_repo = await integration_env.get(UserRepository)
        author = await make_user(integration_env)
        voter = await make_user(integration_env)
        community = await make_community(integration_env, author)
        post = await make_post(integration_env, author, community)

        # Act & Assert
        tally = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)
        assert tally.score == 1

        tally = await vote_service.cast_vote(voter.id, VotableType.POST, post.id, -1)
        assert (tally.score, tally.upvotes, tally.downvotes) == (-1, 0, 1)
        vote = await vote_repo.find(voter.id, VotableType.POST, post.id)
        assert vote.value == VoteValue.DOWN

        stored_author = await user_repo.find_by_id(author.id)
        assert stored_author.karma.post == -1
        assert stored_author.karma.total == -1

        tally = await vote_service.remove_vote(voter.id, VotableType.POST, post.id)
        assert tally.score == 0
        stored = await post_repo.find_by_id(post.id)
        assert (stored.score, stored.upvotes, stored.downvotes) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_batch_lookup(self, integration_env):
        """find_by_voter_and_targets returns only the voter's votes."""
        vote_service = await integration_env.get(VoteService)
        author = await make_user(integration_env)
        voter = await make_user(integration_env)
        community = await make_community(integration_env, author)
        first = await make_post(integration_env, author, community, "First post")
        second = await make_post(integration_env, author, community, "Second post")

        await vote_service.cast_vote(author.id, VotableType.POST, first.id, 1)
        await vote_service.cast_vote(voter.id, VotableType.POST, second.id, 1)
        votes = await vote_service.get_user_votes(
            voter.id, VotableType.POST, [first.id, second.id]
        )

        assert votes == {second.id: VoteValue.UP}


class TestCommentTreeIntegration:
    """Materialized paths against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_subtree_by_path_prefix(self, integration_env):
        """The prefix query returns the subtree and nothing else."""
        comment_repo = await integration_env.get(CommentRepository)
        author = await make_user(integration_env)
        community = await make_community(integration_env, author)
        post = await make_post(integration_env, author, community)
        a = await make_comment(integration_env, author, post.id, "A")
        b = await make_comment(integration_env, author, post.id, "B", a.id)
        c = await make_comment(integration_env, author, post.id, "C", b.id)
        await make_comment(integration_env, author, post.id, "Sibling", a.id)

        subtree = await comment_repo.find_by_post(post.id, path_prefix=b.path)

        assert [comment.id for comment in subtree] == [b.id, c.id]

    @pytest.mark.asyncio
    async def test_soft_delete_keeps_path(self, integration_env):
        """Deleted comments keep their place and refuse replies."""
        comment_service = await integration_env.get(CommentService)
        post_repo = await integration_env.get(PostRepository)
        author = await make_user(integration_env)
        community = await make_community(integration_env, author)
        post = await make_post(integration_env, author, community)
        a = await make_comment(integration_env, author, post.id, "A")

        deleted = await comment_service.delete_comment(a.id, author.id)

        assert deleted.deleted
        assert deleted.path == a.path
        assert deleted.content == "[deleted]"
        stored_post = await post_repo.find_by_id(post.id)
        assert stored_post.comment_count == 0
        with pytest.raises(ContentDeletedException):
            await make_comment(integration_env, author, post.id, "Reply", a.id)

    @pytest.mark.asyncio
    async def test_reply_under_shared_parent_lock(self, integration_env):
        """FOR SHARE on the parent lets replies through in one transaction."""
        comment_repo = await integration_env.get(CommentRepository)
        author = await make_user(integration_env)
        community = await make_community(integration_env, author)
        post = await make_post(integration_env, author, community)
        a = await make_comment(integration_env, author, post.id, "A")

        locked = await comment_repo.lock(a.id, shared=True)
        first = await make_comment(integration_env, author, post.id, "B1", a.id)
        second = await make_comment(integration_env, author, post.id, "B2", a.id)

        assert locked.id == a.id
        assert {first.parent_id, second.parent_id} == {a.id}

    @pytest.mark.asyncio
    async def test_collapse_flag_persists(self, integration_env):
        comment_service = await integration_env.get(CommentService)
        comment_repo = await integration_env.get(CommentRepository)
        author = await make_user(integration_env)
        community = await make_community(integration_env, author)
        post = await make_post(integration_env, author, community)
        a = await make_comment(integration_env, author, post.id, "A")

        await comment_service.collapse_comment(a.id, author.id)

        stored = await comment_repo.find_by_id(a.id)
        assert stored.collapsed is True


class TestCommunityIntegration:
    """Memberships against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_membership_counter(self, integration_env):
        """member_count follows membership rows, joins are idempotent."""
        community_service = await integration_env.get(CommunityService)
        creator = await make_user(integration_env)
        member = await make_user(integration_env)
        slug = f"c-{uuid4().hex[:8]}"
        await make_community(integration_env, creator, slug)

        _, joined = await community_service.join(Slug(slug), member.id)
        community, joined_again = await community_service.join(Slug(slug), member.id)

        assert (joined, joined_again) == (True, False)
        assert community.member_count == 2


class TestPostAndProfileUpdatesIntegration:
    """Edits and moderation flags against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_post_edit_and_moderation(self, integration_env):
        """Edits set ``edited``; pinned posts lead the community listing."""
        post_service = await integration_env.get(PostService)
        author = await make_user(integration_env)
        community = await make_community(integration_env, author)
        first = await make_post(integration_env, author, community, title="First")
        second = await make_post(integration_env, author, community, title="Second")

        edited = await post_service.update_post(
            first.id, author.id, content="Revised"
        )
        pinned = await post_service.moderate_post(
            first.id, author.id, locked=True, pinned=True
        )
        listing = await post_service.list_posts(
            community_id=community.id, sort=PostSortOrder.NEW
        )

        assert (edited.edited, edited.content, edited.title) == (
            True,
            "Revised",
            "First",
        )
        assert (pinned.locked, pinned.pinned) == (True, True)
        assert [p.id for p in listing] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_profile_update(self, integration_env):
        user_service = await integration_env.get(UserService)
        user = await make_user(integration_env)

        await user_service.update_profile(user.id, display_name="Ada", bio="Hi")
        cleared = await user_service.update_profile(user.id, bio="")

        assert cleared.display_name == "Ada"
        assert cleared.bio is None
