"""PostgreSQL repository implementations."""

from tally.persistence.repository.like import PostgresLikeRepository
from tally.persistence.repository.post import PostgresPostRepository

__all__ = [
    "PostgresLikeRepository",
    "PostgresPostRepository",
]
