"""Unit tests for CommentService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio

from forum.domain.error import (
    ContentDeletedException,
    MaxDepthExceeded,
    NotAuthorizedError,
    ParentPostMismatch,
    PostLockedError,
    TargetNotFound,
    ValidationError,
)
from forum.domain.model.comment import DELETED_CONTENT
from forum.domain.repository import CommentRepository, PostRepository
from forum.domain.service import CommentService, PostService, VoteService
from forum.domain.value import CommentId, PostId, ThreadSortOrder, VotableType
from tests.conftest import make_comment, make_community, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


@pytest_asyncio.fixture
async def seeded(unit_env):
    """An author and a post."""
    author = await make_user(unit_env, "author")
    community = await make_community(unit_env, author, "science")
    post = await make_post(unit_env, author, community)
    return author, post


class TestCreateComment:
    """Tests for create_comment."""

    @pytest.mark.asyncio
    async def test_top_level_comment(self, unit_env, seeded):
        """A top-level comment has depth 0 and a one-segment path."""
        # Arrange
        author, post = seeded
        post_repo = await unit_env.get(PostRepository)

        # Act
        comment = await make_comment(unit_env, author, post.id, "First!")

        # Assert
        assert comment.depth == 0
        assert comment.parent_id is None
        assert comment.path == str(comment.id)
        stored_post = await post_repo.find_by_id(post.id)
        assert stored_post.comment_count == 1

    @pytest.mark.asyncio
    async def test_reply_extends_parent_path(self, unit_env, seeded):
        """Replies carry their parent's path plus their own id."""
        author, post = seeded

        root = await make_comment(unit_env, author, post.id, "Root")
        reply = await make_comment(unit_env, author, post.id, "Reply", root.id)
        nested = await make_comment(unit_env, author, post.id, "Nested", reply.id)

        assert reply.depth == 1
        assert reply.path == f"{root.id}/{reply.id}"
        assert nested.depth == 2
        assert nested.path == f"{root.id}/{reply.id}/{nested.id}"

    @pytest.mark.asyncio
    async def test_reply_reads_parent_under_shared_lock(
        self, unit_env, seeded, monkeypatch
    ):
        """The parent is read with a shared row lock, not a plain read."""
        author, post = seeded
        comment_repo = await unit_env.get(CommentRepository)
        root = await make_comment(unit_env, author, post.id, "Root")
        locked = []
        original_lock = comment_repo.lock

        async def recording_lock(comment_id, shared=False):
            locked.append((comment_id, shared))
            return await original_lock(comment_id, shared=shared)

        monkeypatch.setattr(comment_repo, "lock", recording_lock)

        await make_comment(unit_env, author, post.id, "Reply", root.id)

        assert locked == [(root.id, True)]

    @pytest.mark.asyncio
    async def test_max_depth_enforced(self, unit_env, seeded):
        """Depth 5 is the deepest reply allowed."""
        author, post = seeded
        post_repo = await unit_env.get(PostRepository)

        parent_id = None
        for level in range(6):
            comment = await make_comment(
                unit_env, author, post.id, f"Level {level}", parent_id
            )
            parent_id = comment.id
        assert comment.depth == 5

        with pytest.raises(MaxDepthExceeded):
            await make_comment(unit_env, author, post.id, "Too deep", parent_id)

        stored_post = await post_repo.find_by_id(post.id)
        assert stored_post.comment_count == 6

    @pytest.mark.asyncio
    async def test_missing_post_raises(self, unit_env, seeded):
        """Commenting on an unknown post raises TargetNotFound."""
        author, _ = seeded

        with pytest.raises(TargetNotFound):
            await make_comment(unit_env, author, PostId(uuid4()))

    @pytest.mark.asyncio
    async def test_missing_parent_raises(self, unit_env, seeded):
        """Replying to an unknown comment raises TargetNotFound."""
        author, post = seeded

        with pytest.raises(TargetNotFound):
            await make_comment(unit_env, author, post.id, parent_id=CommentId(uuid4()))

    @pytest.mark.asyncio
    async def test_parent_on_other_post_rejected(self, unit_env, seeded):
        """A reply's parent must belong to the same post."""
        author, post = seeded
        community = await make_community(unit_env, author)
        other_post = await make_post(unit_env, author, community, title="Other")
        parent = await make_comment(unit_env, author, other_post.id)

        with pytest.raises(ParentPostMismatch):
            await make_comment(unit_env, author, post.id, parent_id=parent.id)

    @pytest.mark.asyncio
    async def test_reply_to_deleted_parent_rejected(self, unit_env, seeded):
        """Deleted comments can't receive new replies."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        parent = await make_comment(unit_env, author, post.id)
        await comment_service.delete_comment(parent.id, author.id)

        with pytest.raises(ContentDeletedException):
            await make_comment(unit_env, author, post.id, parent_id=parent.id)

    @pytest.mark.asyncio
    async def test_comment_on_deleted_post_rejected(self, unit_env, seeded):
        """Deleted posts can't receive comments."""
        author, post = seeded
        post_service = await unit_env.get(PostService)
        await post_service.delete_post(post.id, author.id)

        with pytest.raises(ContentDeletedException):
            await make_comment(unit_env, author, post.id)

    @pytest.mark.asyncio
    async def test_comment_on_locked_post_rejected(self, unit_env, seeded):
        """Locked posts can't receive comments."""
        author, post = seeded
        post_repo = await unit_env.get(PostRepository)
        await post_repo.create(post.model_copy(update={"locked": True}))

        with pytest.raises(PostLockedError):
            await make_comment(unit_env, author, post.id)


class TestGetThread:
    """Tests for get_thread."""

    @pytest.mark.asyncio
    async def test_deleted_comment_with_live_reply_is_tombstone(
        self, unit_env, seeded
    ):
        """A -> B -> C with B deleted keeps B as [deleted] so C stays attached."""
        # Arrange
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        a = await make_comment(unit_env, author, post.id, "A")
        b = await make_comment(unit_env, author, post.id, "B", a.id)
        c = await make_comment(unit_env, author, post.id, "C", b.id)

        # Act
        await comment_service.delete_comment(b.id, author.id)
        thread = await comment_service.get_thread(post.id)

        # Assert
        by_id = {item.comment.id: item for item in thread}
        assert set(by_id) == {a.id, b.id, c.id}
        assert by_id[b.id].comment.deleted
        assert by_id[b.id].comment.content == DELETED_CONTENT
        assert by_id[b.id].comment.path == b.path
        assert by_id[c.id].comment.parent_id == b.id
        assert by_id[a.id].child_count == 1
        assert by_id[b.id].child_count == 1

    @pytest.mark.asyncio
    async def test_deleted_leaf_is_dropped(self, unit_env, seeded):
        """Once C is also deleted, neither B nor C has a live descendant."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        a = await make_comment(unit_env, author, post.id, "A")
        b = await make_comment(unit_env, author, post.id, "B", a.id)
        c = await make_comment(unit_env, author, post.id, "C", b.id)

        await comment_service.delete_comment(b.id, author.id)
        await comment_service.delete_comment(c.id, author.id)
        thread = await comment_service.get_thread(post.id)

        assert [item.comment.id for item in thread] == [a.id]
        assert thread[0].child_count == 0

    @pytest.mark.asyncio
    async def test_best_sort_orders_by_score(self, unit_env, seeded):
        """Higher-scored comments come first."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        vote_service = await unit_env.get(VoteService)
        voter = await make_user(unit_env, "voter")
        low = await make_comment(unit_env, author, post.id, "Low")
        high = await make_comment(unit_env, author, post.id, "High")
        await vote_service.cast_vote(voter.id, VotableType.COMMENT, high.id, 1)
        await vote_service.cast_vote(voter.id, VotableType.COMMENT, low.id, -1)

        thread = await comment_service.get_thread(post.id, sort=ThreadSortOrder.BEST)

        assert [item.comment.id for item in thread] == [high.id, low.id]

    @pytest.mark.asyncio
    async def test_new_sort_orders_by_recency(self, unit_env, seeded):
        """Newest comments come first."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        base = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        first = await make_comment(unit_env, author, post.id, "First", created_at=base)
        second = await make_comment(
            unit_env, author, post.id, "Second", created_at=base + timedelta(minutes=5)
        )

        thread = await comment_service.get_thread(post.id, sort=ThreadSortOrder.NEW)

        assert [item.comment.id for item in thread] == [second.id, first.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort", [ThreadSortOrder.NEW, ThreadSortOrder.BEST])
    async def test_ties_fall_back_to_path_order(self, unit_env, seeded, sort):
        """Comments with equal creation time and score keep path order."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        comments = [
            await make_comment(unit_env, author, post.id, f"Tied {i}", created_at=at)
            for i in range(4)
        ]

        thread = await comment_service.get_thread(post.id, sort=sort)

        expected = [c.id for c in sorted(comments, key=lambda c: c.path)]
        assert [item.comment.id for item in thread] == expected

    @pytest.mark.asyncio
    async def test_subtree(self, unit_env, seeded):
        """root_comment_id returns that comment and its descendants only."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        a = await make_comment(unit_env, author, post.id, "A")
        b = await make_comment(unit_env, author, post.id, "B", a.id)
        c = await make_comment(unit_env, author, post.id, "C", b.id)
        await make_comment(unit_env, author, post.id, "Sibling of A")
        await make_comment(unit_env, author, post.id, "Sibling of B", a.id)

        thread = await comment_service.get_thread(post.id, root_comment_id=b.id)

        assert {item.comment.id for item in thread} == {b.id, c.id}

    @pytest.mark.asyncio
    async def test_subtree_root_on_other_post_raises(self, unit_env, seeded):
        """The subtree root must belong to the post."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        community = await make_community(unit_env, author)
        other_post = await make_post(unit_env, author, community, title="Other")
        foreign = await make_comment(unit_env, author, other_post.id)

        with pytest.raises(TargetNotFound):
            await comment_service.get_thread(post.id, root_comment_id=foreign.id)

    @pytest.mark.asyncio
    async def test_limit(self, unit_env, seeded):
        """The thread is cut at ``limit`` comments."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        for i in range(5):
            await make_comment(unit_env, author, post.id, f"Comment {i}")

        thread = await comment_service.get_thread(post.id, limit=3)

        assert len(thread) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 501])
    async def test_limit_out_of_range(self, unit_env, seeded, limit):
        """Limits outside 1..max_limit are rejected."""
        _, post = seeded
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(ValidationError):
            await comment_service.get_thread(post.id, limit=limit)


class TestEditAndDeleteComment:
    """Tests for edit_comment and delete_comment."""

    @pytest.mark.asyncio
    async def test_edit_by_author(self, unit_env, seeded):
        """Authors can edit; the comment is marked edited."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        comment = await make_comment(unit_env, author, post.id, "Original")

        edited = await comment_service.edit_comment(comment.id, author.id, "Changed")

        assert edited.content == "Changed"
        assert edited.edited

    @pytest.mark.asyncio
    async def test_edit_by_other_user_rejected(self, unit_env, seeded):
        """Only the author may edit."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        stranger = await make_user(unit_env, "stranger")
        comment = await make_comment(unit_env, author, post.id)

        with pytest.raises(NotAuthorizedError):
            await comment_service.edit_comment(comment.id, stranger.id, "Hijacked")

    @pytest.mark.asyncio
    async def test_edit_deleted_rejected(self, unit_env, seeded):
        """Deleted comments can't be edited back to life."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        comment = await make_comment(unit_env, author, post.id)
        await comment_service.delete_comment(comment.id, author.id)

        with pytest.raises(ContentDeletedException):
            await comment_service.edit_comment(comment.id, author.id, "Back")

    @pytest.mark.asyncio
    async def test_delete_decrements_comment_count_once(self, unit_env, seeded):
        """Deleting twice only drops the post's comment count once."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        comment = await make_comment(unit_env, author, post.id)
        await make_comment(unit_env, author, post.id)

        first = await comment_service.delete_comment(comment.id, author.id)
        second = await comment_service.delete_comment(comment.id, author.id)

        assert first.deleted and second.deleted
        stored_post = await post_repo.find_by_id(post.id)
        assert stored_post.comment_count == 1

    @pytest.mark.asyncio
    async def test_delete_by_other_user_rejected(self, unit_env, seeded):
        """Only the author may delete."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        stranger = await make_user(unit_env, "stranger")
        comment = await make_comment(unit_env, author, post.id)

        with pytest.raises(NotAuthorizedError):
            await comment_service.delete_comment(comment.id, stranger.id)

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, unit_env, seeded):
        """Deleting an unknown comment raises TargetNotFound."""
        author, _ = seeded
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(TargetNotFound):
            await comment_service.delete_comment(CommentId(uuid4()), author.id)


class TestCollapseComment:
    """Tests for collapse_comment."""

    @pytest.mark.asyncio
    async def test_moderator_collapses_and_thread_keeps_it(self, unit_env, seeded):
        """A collapsed comment stays in the thread, flagged, with its replies."""
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        commenter = await make_user(unit_env, "commenter")
        noisy = await make_comment(unit_env, commenter, post.id, "Off topic")
        reply = await make_comment(unit_env, commenter, post.id, "More", noisy.id)

        collapsed = await comment_service.collapse_comment(noisy.id, author.id)
        thread = await comment_service.get_thread(post.id)

        assert collapsed.collapsed is True
        by_id = {item.comment.id: item.comment for item in thread}
        assert by_id[noisy.id].collapsed is True
        assert by_id[reply.id].collapsed is False

    @pytest.mark.asyncio
    async def test_expand_clears_flag(self, unit_env, seeded):
        author, post = seeded
        comment_service = await unit_env.get(CommentService)
        comment = await make_comment(unit_env, author, post.id)
        await comment_service.collapse_comment(comment.id, author.id)

        expanded = await comment_service.collapse_comment(
            comment.id, author.id, collapsed=False
        )

        assert expanded.collapsed is False

    @pytest.mark.asyncio
    async def test_non_moderator_rejected(self, unit_env, seeded):
        """Comment authors can't collapse comments, even their own."""
        _, post = seeded
        comment_service = await unit_env.get(CommentService)
        commenter = await make_user(unit_env, "commenter")
        comment = await make_comment(unit_env, commenter, post.id)

        with pytest.raises(NotAuthorizedError):
            await comment_service.collapse_comment(comment.id, commenter.id)

        stored = await comment_service.get_comment_by_id(comment.id)
        assert stored.collapsed is False

    @pytest.mark.asyncio
    async def test_missing_comment_raises(self, unit_env, seeded):
        author, _ = seeded
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(TargetNotFound):
            await comment_service.collapse_comment(CommentId(uuid4()), author.id)
