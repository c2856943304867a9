"""Infrastructure providers."""

# Import bases
from .counter_store import CounterStoreProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .counter_store import ProdCounterStoreProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "CounterStoreProvider",
    "PersistenceProvider",
    "ProdCounterStoreProvider",
    "ProdPersistenceProvider",
]
