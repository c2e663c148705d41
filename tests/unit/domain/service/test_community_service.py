"""Unit tests for CommunityService."""

import pytest

from forum.domain.error import AlreadyExistsError, NotFoundError
from forum.domain.service import CommunityService
from forum.domain.value import CommunitySortOrder, Slug
from tests.conftest import make_community, make_post, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateCommunity:
    """Tests for create_community."""

    @pytest.mark.asyncio
    async def test_creator_is_moderator_and_member(self, unit_env):
        """The creator moderates and is the first member."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")

        community = await community_service.create_community(
            creator.id, name="Neuroscience", slug=Slug("neuroscience")
        )

        assert community.moderators == [creator.id]
        assert community.member_count == 1
        assert community.post_count == 0
        assert await community_service.is_member(community.id, creator.id)

    @pytest.mark.asyncio
    async def test_duplicate_slug_rejected(self, unit_env):
        """Slugs are unique."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        await make_community(unit_env, creator, "physics")

        with pytest.raises(AlreadyExistsError):
            await community_service.create_community(
                creator.id, name="Physics again", slug=Slug("physics")
            )


class TestMembership:
    """Tests for join and leave."""

    @pytest.mark.asyncio
    async def test_join_twice_counts_once(self, unit_env):
        """Joining is idempotent."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        member = await make_user(unit_env, "member")
        await make_community(unit_env, creator, "biology")

        community, joined = await community_service.join(Slug("biology"), member.id)
        again, joined_again = await community_service.join(Slug("biology"), member.id)

        assert joined is True
        assert joined_again is False
        assert community.member_count == 2
        assert again.member_count == 2

    @pytest.mark.asyncio
    async def test_leave_without_membership_is_noop(self, unit_env):
        """Leaving a community you never joined changes nothing."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        stranger = await make_user(unit_env, "stranger")
        await make_community(unit_env, creator, "biology")

        community, left = await community_service.leave(Slug("biology"), stranger.id)

        assert left is False
        assert community.member_count == 1

    @pytest.mark.asyncio
    async def test_join_then_leave(self, unit_env):
        """Member count follows membership rows."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        member = await make_user(unit_env, "member")
        community = await make_community(unit_env, creator, "biology")

        await community_service.join(Slug("biology"), member.id)
        after, left = await community_service.leave(Slug("biology"), member.id)

        assert left is True
        assert after.member_count == 1
        assert not await community_service.is_member(community.id, member.id)

    @pytest.mark.asyncio
    async def test_join_unknown_community_raises(self, unit_env):
        """Joining needs an existing community."""
        community_service = await unit_env.get(CommunityService)
        member = await make_user(unit_env, "member")

        with pytest.raises(NotFoundError):
            await community_service.join(Slug("nowhere"), member.id)


class TestListCommunities:
    """Tests for list_communities."""

    @pytest.mark.asyncio
    async def test_popular_orders_by_members(self, unit_env):
        """Most members first."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        member = await make_user(unit_env, "member")
        small = await make_community(unit_env, creator, "small")
        big = await make_community(unit_env, creator, "big")
        await community_service.join(Slug("big"), member.id)

        communities = await community_service.list_communities(
            sort=CommunitySortOrder.POPULAR
        )

        assert [c.id for c in communities] == [big.id, small.id]

    @pytest.mark.asyncio
    async def test_active_orders_by_last_post(self, unit_env):
        """Communities with recent posts come first."""
        community_service = await unit_env.get(CommunityService)
        creator = await make_user(unit_env, "creator")
        busy = await make_community(unit_env, creator, "busy")
        quiet = await make_community(unit_env, creator, "quiet")
        await make_post(unit_env, creator, busy)

        communities = await community_service.list_communities(
            sort=CommunitySortOrder.ACTIVE
        )

        assert [c.id for c in communities] == [busy.id, quiet.id]
        assert communities[0].post_count == 1
