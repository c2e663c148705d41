"""Domain layer DI providers."""

from dishka import Scope, provide

from forum.config import RankingSettings, ThreadSettings, VotingSettings
from forum.domain.repository import (
    CommentRepository,
    CommunityRepository,
    PostRepository,
    UnitOfWork,
    UserRepository,
    VoteRepository,
)
from forum.domain.service import (
    AggregateMaintainer,
    CommentService,
    CommunityService,
    KarmaLedger,
    PostService,
    UserService,
    VoteService,
)
from forum.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_aggregate_maintainer(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        ranking_settings: RankingSettings,
    ) -> AggregateMaintainer:
        """Provide the vote aggregate maintainer."""
        return AggregateMaintainer(
            vote_repository=vote_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
            decay_seconds=ranking_settings.decay_seconds,
        )

    @provide
    def get_karma_ledger(self, user_repository: UserRepository) -> KarmaLedger:
        """Provide the karma ledger."""
        return KarmaLedger(user_repository=user_repository)

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        aggregate_maintainer: AggregateMaintainer,
        karma_ledger: KarmaLedger,
        unit_of_work: UnitOfWork,
        voting_settings: VotingSettings,
    ) -> VoteService:
        """Provide vote domain service."""
        return VoteService(
            vote_repository=vote_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
            aggregate_maintainer=aggregate_maintainer,
            karma_ledger=karma_ledger,
            unit_of_work=unit_of_work,
            max_attempts=voting_settings.max_attempts,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        community_repository: CommunityRepository,
        unit_of_work: UnitOfWork,
        thread_settings: ThreadSettings,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_repository=post_repository,
            community_repository=community_repository,
            unit_of_work=unit_of_work,
            max_depth=thread_settings.max_depth,
            default_limit=thread_settings.default_limit,
            max_limit=thread_settings.max_limit,
        )

    @provide
    def get_post_service(
        self,
        post_repository: PostRepository,
        community_repository: CommunityRepository,
        aggregate_maintainer: AggregateMaintainer,
        unit_of_work: UnitOfWork,
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository,
            community_repository=community_repository,
            aggregate_maintainer=aggregate_maintainer,
            unit_of_work=unit_of_work,
        )

    @provide
    def get_community_service(
        self, community_repository: CommunityRepository, unit_of_work: UnitOfWork
    ) -> CommunityService:
        """Provide community domain service."""
        return CommunityService(
            community_repository=community_repository, unit_of_work=unit_of_work
        )

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
        )
