"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from tally.domain.model.post import Post
from tally.domain.value import PostId


class PostRepository(ABC):
    """Repository for the durable side of post like counts.

    Defines the contract for post persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all(self, limit: int = 200, offset: int = 0) -> List[Post]:
        """Page through all posts in a stable order.

        Args:
            limit: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            Posts ordered by ID
        """
        pass

    @abstractmethod
    async def get_like_counts(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Read last-synced like counts for several posts (batch query).

        Args:
            post_ids: Posts to read

        Returns:
            Mapping for the posts that exist; unknown ids are absent
        """
        pass

    @abstractmethod
    async def set_like_count(self, post_id: PostId, count: int) -> bool:
        """Overwrite the like count with an absolute value.

        Never increments: every write carries the full authoritative value so
        a lost or repeated write is corrected by the next one.

        Args:
            post_id: The post ID
            count: New absolute count (negative values are clamped to 0)

        Returns:
            True if the post existed and was updated
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a post (create or replace).

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass
