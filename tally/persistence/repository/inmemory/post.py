"""In-memory post repository for testing."""

from datetime import datetime
from typing import List, Optional, Sequence

from tally.domain.model.post import Post
from tally.domain.repository.post import PostRepository
from tally.domain.value import PostId


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing.

    Set ``available`` to False to make every call fail like an unreachable
    database.
    """

    def __init__(self) -> None:
        self._posts: dict[PostId, Post] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise ConnectionError("durable store offline")

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        self._check()
        return self._posts.get(post_id)

    async def find_all(self, limit: int = 200, offset: int = 0) -> List[Post]:
        """Page through all posts ordered by ID."""
        self._check()
        ordered = sorted(self._posts.values(), key=lambda p: p.id)
        return ordered[offset : offset + limit]

    async def get_like_counts(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Read like counts for the posts that exist."""
        self._check()
        return {
            post_id: self._posts[post_id].likes
            for post_id in post_ids
            if post_id in self._posts
        }

    async def set_like_count(self, post_id: PostId, count: int) -> bool:
        """SET the like count."""
        self._check()
        post = self._posts.get(post_id)
        if not post:
            return False
        self._posts[post_id] = post.model_copy(
            update={"likes": max(count, 0), "updated_at": datetime.now()}
        )
        return True

    async def save(self, post: Post) -> Post:
        """Save a post."""
        self._check()
        self._posts[post.id] = post
        return post
