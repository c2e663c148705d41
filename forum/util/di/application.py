"""Application layer DI providers."""

from dishka import Scope, provide

from forum.application.usecase.comment import (
    CollapseCommentUseCase,
    CreateCommentUseCase,
    DeleteCommentUseCase,
    EditCommentUseCase,
    GetThreadUseCase,
)
from forum.application.usecase.community import (
    CreateCommunityUseCase,
    GetCommunityUseCase,
    ListCommunitiesUseCase,
    MembershipUseCase,
)
from forum.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetPostUseCase,
    ListPostsUseCase,
    ModeratePostUseCase,
    RecomputeHotScoreUseCase,
    UpdatePostUseCase,
)
from forum.application.usecase.user import (
    GetUserKarmaUseCase,
    RegisterUserUseCase,
    UpdateUserProfileUseCase,
)
from forum.application.usecase.vote import CastVoteUseCase, RemoveVoteUseCase
from forum.domain.service import (
    CommentService,
    CommunityService,
    PostService,
    UserService,
    VoteService,
)
from forum.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_cast_vote_use_case(
        self, vote_service: VoteService, user_service: UserService
    ) -> CastVoteUseCase:
        """Provide cast vote use case."""
        return CastVoteUseCase(vote_service=vote_service, user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_remove_vote_use_case(self, vote_service: VoteService) -> RemoveVoteUseCase:
        """Provide remove vote use case."""
        return RemoveVoteUseCase(vote_service=vote_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService, user_service: UserService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(
            comment_service=comment_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_get_thread_use_case(
        self,
        comment_service: CommentService,
        post_service: PostService,
        vote_service: VoteService,
    ) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(
            comment_service=comment_service,
            post_service=post_service,
            vote_service=vote_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_edit_comment_use_case(
        self, comment_service: CommentService
    ) -> EditCommentUseCase:
        """Provide edit comment use case."""
        return EditCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_collapse_comment_use_case(
        self, comment_service: CommentService
    ) -> CollapseCommentUseCase:
        """Provide collapse comment use case."""
        return CollapseCommentUseCase(comment_service=comment_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(
        self,
        post_service: PostService,
        community_service: CommunityService,
        user_service: UserService,
    ) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(
            post_service=post_service,
            community_service=community_service,
            user_service=user_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_post_use_case(
        self, post_service: PostService, vote_service: VoteService
    ) -> GetPostUseCase:
        """Provide get post use case."""
        return GetPostUseCase(post_service=post_service, vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_list_posts_use_case(
        self,
        post_service: PostService,
        community_service: CommunityService,
        vote_service: VoteService,
    ) -> ListPostsUseCase:
        """Provide list posts use case."""
        return ListPostsUseCase(
            post_service=post_service,
            community_service=community_service,
            vote_service=vote_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(self, post_service: PostService) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_recompute_hot_score_use_case(
        self, post_service: PostService
    ) -> RecomputeHotScoreUseCase:
        """Provide recompute hot score use case."""
        return RecomputeHotScoreUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_update_post_use_case(self, post_service: PostService) -> UpdatePostUseCase:
        """Provide update post use case."""
        return UpdatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_moderate_post_use_case(
        self, post_service: PostService
    ) -> ModeratePostUseCase:
        """Provide moderate post use case."""
        return ModeratePostUseCase(post_service=post_service)

    # Community use cases
    @provide(scope=Scope.REQUEST)
    def get_create_community_use_case(
        self, community_service: CommunityService, user_service: UserService
    ) -> CreateCommunityUseCase:
        """Provide create community use case."""
        return CreateCommunityUseCase(
            community_service=community_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_get_community_use_case(
        self, community_service: CommunityService
    ) -> GetCommunityUseCase:
        """Provide get community use case."""
        return GetCommunityUseCase(community_service=community_service)

    @provide(scope=Scope.REQUEST)
    def get_list_communities_use_case(
        self, community_service: CommunityService
    ) -> ListCommunitiesUseCase:
        """Provide list communities use case."""
        return ListCommunitiesUseCase(community_service=community_service)

    @provide(scope=Scope.REQUEST)
    def get_membership_use_case(
        self, community_service: CommunityService, user_service: UserService
    ) -> MembershipUseCase:
        """Provide membership use case."""
        return MembershipUseCase(
            community_service=community_service, user_service=user_service
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_register_user_use_case(
        self, user_service: UserService
    ) -> RegisterUserUseCase:
        """Provide register user use case."""
        return RegisterUserUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_get_user_karma_use_case(
        self, user_service: UserService
    ) -> GetUserKarmaUseCase:
        """Provide get user karma use case."""
        return GetUserKarmaUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_user_profile_use_case(
        self, user_service: UserService
    ) -> UpdateUserProfileUseCase:
        """Provide update user profile use case."""
        return UpdateUserProfileUseCase(user_service=user_service)
