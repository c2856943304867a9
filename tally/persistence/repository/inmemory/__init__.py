"""In-memory repository implementations for testing."""

from tally.persistence.repository.inmemory.like import InMemoryLikeRepository
from tally.persistence.repository.inmemory.post import InMemoryPostRepository

__all__ = [
    "InMemoryLikeRepository",
    "InMemoryPostRepository",
]
