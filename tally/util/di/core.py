"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from tally.config import CounterSettings, RedisSettings, Settings, SyncSettings
from tally.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_redis_settings(self, settings: Settings) -> RedisSettings:
        """Provide atomic store settings."""
        return settings.redis

    @provide(scope=Scope.APP)
    def provide_counter_settings(self, settings: Settings) -> CounterSettings:
        """Provide counter behaviour settings."""
        return settings.counters

    @provide(scope=Scope.APP)
    def provide_sync_settings(self, settings: Settings) -> SyncSettings:
        """Provide durable sync settings."""
        return settings.sync
