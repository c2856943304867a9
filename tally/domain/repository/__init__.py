"""Repository interfaces for Tally.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from tally.domain.repository.counter import CounterStore
from tally.domain.repository.like import LikeRepository
from tally.domain.repository.post import PostRepository

__all__ = [
    "CounterStore",
    "LikeRepository",
    "PostRepository",
]
