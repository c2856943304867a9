"""Mock providers for testing."""

from .counter_store import MockCounterStoreProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockCounterStoreProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
