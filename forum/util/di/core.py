"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from forum.config import RankingSettings, Settings, ThreadSettings, VotingSettings
from forum.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_ranking_settings(self, settings: Settings) -> RankingSettings:
        """Provide ranking settings."""
        return settings.ranking

    @provide(scope=Scope.APP)
    def provide_voting_settings(self, settings: Settings) -> VotingSettings:
        """Provide voting settings."""
        return settings.voting

    @provide(scope=Scope.APP)
    def provide_thread_settings(self, settings: Settings) -> ThreadSettings:
        """Provide comment thread settings."""
        return settings.threads
