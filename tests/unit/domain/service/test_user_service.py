"""Unit tests for UserService."""

from uuid import uuid4

import pytest

from forum.domain.error import AlreadyExistsError, NotFoundError, ValidationError
from forum.domain.service import CommentService, UserService, VoteService
from forum.domain.value import UserId, Username, VotableType
from tests.conftest import make_comment, make_community, make_post, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRegisterUser:
    """Tests for register_user."""

    @pytest.mark.asyncio
    async def test_register_new_user(self, unit_env):
        """A new ID creates a user with zero karma."""
        user_service = await unit_env.get(UserService)
        user_id = UserId(uuid4())

        user, created = await user_service.register_user(
            user_id, Username("ada"), display_name="Ada"
        )

        assert created is True
        assert user.id == user_id
        assert user.display_name == "Ada"
        assert user.karma.total == 0

    @pytest.mark.asyncio
    async def test_register_existing_id_returns_stored_user(self, unit_env):
        """Registering twice is idempotent."""
        user_service = await unit_env.get(UserService)
        user_id = UserId(uuid4())
        await user_service.register_user(user_id, Username("ada"))

        user, created = await user_service.register_user(user_id, Username("other"))

        assert created is False
        assert user.username == Username("ada")

    @pytest.mark.asyncio
    async def test_username_taken(self, unit_env):
        """Usernames are unique across users."""
        user_service = await unit_env.get(UserService)
        await user_service.register_user(UserId(uuid4()), Username("ada"))

        with pytest.raises(AlreadyExistsError):
            await user_service.register_user(UserId(uuid4()), Username("ada"))


class TestUpdateProfile:
    """Tests for update_profile."""

    @pytest.mark.asyncio
    async def test_sets_and_keeps_fields(self, unit_env):
        """Only the given fields change; username and karma never do."""
        # Arrange
        user_service = await unit_env.get(UserService)
        user_id = UserId(uuid4())
        await user_service.register_user(user_id, Username("ada"), display_name="Ada")

        # Act
        updated = await user_service.update_profile(user_id, bio="Counts things")

        # Assert
        assert updated.display_name == "Ada"
        assert updated.bio == "Counts things"
        assert updated.username == Username("ada")
        stored = await user_service.get_by_id(user_id)
        assert stored.bio == "Counts things"
        assert stored.karma.total == 0

    @pytest.mark.asyncio
    async def test_empty_string_clears_field(self, unit_env):
        """An empty string removes the display name."""
        user_service = await unit_env.get(UserService)
        user_id = UserId(uuid4())
        await user_service.register_user(user_id, Username("ada"), display_name="Ada")

        updated = await user_service.update_profile(user_id, display_name="")

        assert updated.display_name is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields", [{"display_name": "x" * 101}, {"bio": "x" * 501}]
    )
    async def test_too_long_rejected(self, unit_env, fields):
        """Overlong fields are rejected and nothing is written."""
        user_service = await unit_env.get(UserService)
        user_id = UserId(uuid4())
        await user_service.register_user(user_id, Username("ada"), display_name="Ada")

        with pytest.raises(ValidationError):
            await user_service.update_profile(user_id, **fields)

        stored = await user_service.get_by_id(user_id)
        assert stored.display_name == "Ada"
        assert stored.bio is None

    @pytest.mark.asyncio
    async def test_unknown_user(self, unit_env):
        """Updating a missing user raises NotFoundError."""
        user_service = await unit_env.get(UserService)

        with pytest.raises(NotFoundError):
            await user_service.update_profile(UserId(uuid4()), bio="Hello")


class TestGetUserKarma:
    """Tests for get_user_karma."""

    @pytest.mark.asyncio
    async def test_karma_breakdown(self, unit_env):
        """Post and comment karma are tracked separately and summed."""
        # Arrange
        user_service = await unit_env.get(UserService)
        vote_service = await unit_env.get(VoteService)
        comment_service = await unit_env.get(CommentService)
        author = await make_user(unit_env, "author")
        voter = await make_user(unit_env, "voter")
        community = await make_community(unit_env, author, "science")
        post = await make_post(unit_env, author, community)
        comment = await make_comment(unit_env, author, post.id)
        deleted = await make_comment(unit_env, author, post.id)
        await comment_service.delete_comment(deleted.id, author.id)

        # Act
        await vote_service.cast_vote(voter.id, VotableType.POST, post.id, 1)
        await vote_service.cast_vote(voter.id, VotableType.COMMENT, comment.id, -1)
        summary = await user_service.get_user_karma(author.id)

        # Assert
        assert summary.post_karma == 1
        assert summary.comment_karma == -1
        assert summary.total_karma == 0
        assert summary.post_count == 1
        assert summary.comment_count == 1

    @pytest.mark.asyncio
    async def test_unknown_user(self, unit_env):
        """Unknown users raise NotFoundError."""
        user_service = await unit_env.get(UserService)

        with pytest.raises(NotFoundError):
            await user_service.get_user_karma(UserId(uuid4()))
