"""In-memory like repository for testing."""

from datetime import datetime
from typing import List, Sequence
from uuid import uuid4

from tally.domain.model.like import Like
from tally.domain.repository.like import LikeRepository
from tally.domain.value import ActorId, LikeId, PostId


class InMemoryLikeRepository(LikeRepository):
    """In-memory implementation of LikeRepository for testing."""

    def __init__(self) -> None:
        self._likes: list[Like] = []
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise ConnectionError("durable store offline")

    async def exists(self, post_id: PostId, actor: ActorId) -> bool:
        """Check whether a like record exists."""
        self._check()
        return any(l.post_id == post_id and l.actor == actor for l in self._likes)

    async def find_liked_post_ids(
        self, actor: ActorId, post_ids: Sequence[PostId]
    ) -> set[PostId]:
        """Find which of the given posts an actor likes."""
        self._check()
        wanted = set(post_ids)
        return {
            l.post_id
            for l in self._likes
            if l.actor == actor and l.post_id in wanted
        }

    async def find_by_post(self, post_id: PostId) -> List[Like]:
        """Find all likes on a post."""
        self._check()
        return [l for l in self._likes if l.post_id == post_id]

    async def find_by_posts(self, post_ids: Sequence[PostId]) -> List[Like]:
        """Find all likes on several posts."""
        self._check()
        wanted = set(post_ids)
        return [l for l in self._likes if l.post_id in wanted]

    async def find_by_actor(self, actor: ActorId) -> List[Like]:
        """Find all likes by an actor."""
        self._check()
        return [l for l in self._likes if l.actor == actor]

    async def upsert(self, post_id: PostId, actor: ActorId) -> bool:
        """Insert unless the (post, actor) pair already exists."""
        if await self.exists(post_id, actor):
            return False
        self._likes.append(
            Like(
                id=LikeId(uuid4()),
                post_id=post_id,
                actor=actor,
                created_at=datetime.now(),
            )
        )
        return True

    async def delete(self, post_id: PostId, actor: ActorId) -> bool:
        """Delete a like."""
        self._check()
        before = len(self._likes)
        self._likes = [
            l for l in self._likes if not (l.post_id == post_id and l.actor == actor)
        ]
        return len(self._likes) < before

    async def reassign_actor(self, from_actor: ActorId, to_actor: ActorId) -> int:
        """Move likes between actors, dropping ones the target already has."""
        self._check()
        target_posts = {l.post_id for l in self._likes if l.actor == to_actor}
        moved = 0
        kept: list[Like] = []
        for like in self._likes:
            if like.actor != from_actor:
                kept.append(like)
            elif like.post_id not in target_posts:
                kept.append(like.model_copy(update={"actor": to_actor}))
                moved += 1
        self._likes = kept
        return moved
