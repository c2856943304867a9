"""Redis adapter for the atomic counter store."""

from .client import create_redis
from .keys import CounterKeys
from .store import InMemoryCounterStore, RedisCounterStore

__all__ = [
    "CounterKeys",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "create_redis",
]
