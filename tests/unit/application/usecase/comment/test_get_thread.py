"""Unit tests for GetThreadUseCase."""

from uuid import uuid4

import pytest

from forum.application.usecase.comment.get_thread import (
    GetThreadRequest,
    GetThreadUseCase,
)
from forum.domain.error import TargetNotFound
from forum.domain.service import VoteService
from forum.domain.value import ThreadSortOrder, VotableType
from tests.conftest import make_comment, make_community, make_post, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGetThreadUseCase:
    """Tests for GetThreadUseCase."""

    @pytest.mark.asyncio
    async def test_thread_includes_child_counts_and_viewer_votes(self, unit_env):
        """Each item has its reply count and the viewer's vote."""
        # Arrange
        use_case = await unit_env.get(GetThreadUseCase)
        vote_service = await unit_env.get(VoteService)
        author = await make_user(unit_env, "author")
        viewer = await make_user(unit_env, "viewer")
        community = await make_community(unit_env, author, "science")
        post = await make_post(unit_env, author, community)
        root = await make_comment(unit_env, author, post.id, "Root")
        await make_comment(unit_env, author, post.id, "Reply one", root.id)
        await make_comment(unit_env, author, post.id, "Reply two", root.id)
        await vote_service.cast_vote(viewer.id, VotableType.COMMENT, root.id, 1)

        # Act
        response = await use_case.execute(
            GetThreadRequest(
                post_id=str(post.id),
                sort=ThreadSortOrder.BEST,
                viewer_id=str(viewer.id),
            )
        )

        # Assert
        assert response.total == 3
        first = response.comments[0]
        assert first.comment_id == str(root.id)
        assert first.child_count == 2
        assert first.user_vote == 1
        assert all(item.user_vote is None for item in response.comments[1:])

    @pytest.mark.asyncio
    async def test_unknown_post(self, unit_env):
        """Threads of unknown posts raise TargetNotFound."""
        use_case = await unit_env.get(GetThreadUseCase)

        with pytest.raises(TargetNotFound):
            await use_case.execute(GetThreadRequest(post_id=str(uuid4())))
