"""Atomic counter store infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
import redis.asyncio as redis

from tally.adapter.redis import CounterKeys, RedisCounterStore, create_redis
from tally.config import RedisSettings
from tally.domain.repository import CounterStore
from tally.util.di.base import ProviderBase
from tally.util.observability import instrument_redis


class CounterStoreProvider(ProviderBase):
    """Counter store component base."""

    __mock_component__ = "counter_store"


class ProdCounterStoreProvider(CounterStoreProvider):
    """Production counter store provider using Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_redis(self, settings: RedisSettings) -> AsyncIterator[redis.Redis]:
        """Provide Redis client, closed when the container closes."""
        instrument_redis()
        client = create_redis(settings)
        yield client
        await client.aclose()
        logfire.info("Redis client closed")

    @provide(scope=Scope.APP)
    def get_counter_keys(self, settings: RedisSettings) -> CounterKeys:
        """Provide key schema."""
        return CounterKeys(prefix=settings.key_prefix)

    @provide(scope=Scope.APP)
    def get_counter_store(
        self, client: redis.Redis, keys: CounterKeys
    ) -> CounterStore:
        """Provide Redis-backed counter store."""
        return RedisCounterStore(client=client, keys=keys)
