"""Counter store implementations.

RedisCounterStore is the production atomic store. InMemoryCounterStore keeps
the same state in dictionaries for tests and can be switched off to
simulate an outage.
"""

from collections import defaultdict
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Sequence

import logfire
import redis.asyncio as redis
from redis.exceptions import RedisError

from tally.adapter.error import CounterStoreUnavailableError
from tally.adapter.redis import scripts
from tally.adapter.redis.keys import CounterKeys
from tally.domain.repository.counter import CounterStore
from tally.domain.value import ActorId, PostId


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate redis-py failures into CounterStoreUnavailableError."""
    try:
        yield
    except RedisError as e:
        logfire.warn(
            "Redis command failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise CounterStoreUnavailableError(operation, str(e)) from e


class RedisCounterStore(CounterStore):
    """Redis implementation of CounterStore.

    Toggle and member moves run as Lua scripts so the check-then-act pair is
    atomic per post. Batch reads use MGET or a non-transactional pipeline,
    one round trip regardless of the number of posts.
    """

    def __init__(self, client: redis.Redis, keys: CounterKeys) -> None:
        """Initialize store.

        Args:
            client: Async Redis client
            keys: Key schema
        """
        self.client = client
        self.keys = keys
        self._toggle = client.register_script(scripts.TOGGLE)
        self._move_member = client.register_script(scripts.MOVE_MEMBER)

    async def get_count(self, post_id: PostId) -> Optional[int]:
        """Read one counter."""
        with _store_errors("get_count"):
            value = await self.client.get(self.keys.post_likes(post_id))
        return None if value is None else max(int(value), 0)

    async def get_counts(self, post_ids: Sequence[PostId]) -> List[Optional[int]]:
        """Read many counters with a single MGET."""
        if not post_ids:
            return []

        with _store_errors("get_counts"):
            values = await self.client.mget(
                [self.keys.post_likes(post_id) for post_id in post_ids]
            )
        return [None if v is None else max(int(v), 0) for v in values]

    async def init_count(self, post_id: PostId, count: int) -> bool:
        """SET NX the counter."""
        with _store_errors("init_count"):
            created = await self.client.set(
                self.keys.post_likes(post_id), max(count, 0), nx=True
            )
        return bool(created)

    async def set_count(self, post_id: PostId, count: int) -> None:
        """Overwrite the counter."""
        with _store_errors("set_count"):
            await self.client.set(self.keys.post_likes(post_id), max(count, 0))

    async def toggle(self, post_id: PostId, actor: ActorId) -> tuple[int, bool]:
        """Run the toggle script."""
        with _store_errors("toggle"):
            new_count, is_liked = await self._toggle(
                keys=[
                    self.keys.post_likes(post_id),
                    self.keys.post_liked(post_id),
                    self.keys.actor_likes(actor),
                ],
                args=[actor.member, post_id],
            )
        return int(new_count), bool(int(is_liked))

    async def is_member(self, post_id: PostId, actor: ActorId) -> bool:
        """SISMEMBER on the post's membership set."""
        with _store_errors("is_member"):
            result = await self.client.sismember(
                self.keys.post_liked(post_id), actor.member
            )
        return bool(result)

    async def are_members(
        self, post_ids: Sequence[PostId], actor: ActorId
    ) -> List[bool]:
        """Pipeline one SISMEMBER per post."""
        if not post_ids:
            return []

        with _store_errors("are_members"):
            pipe = self.client.pipeline(transaction=False)
            for post_id in post_ids:
                pipe.sismember(self.keys.post_liked(post_id), actor.member)
            results = await pipe.execute()
        return [bool(r) for r in results]

    async def members(self, post_id: PostId) -> set[ActorId]:
        """SMEMBERS on the post's membership set."""
        with _store_errors("members"):
            raw = await self.client.smembers(self.keys.post_liked(post_id))

        actors = set()
        for member in raw:
            try:
                actors.add(ActorId.parse(member))
            except ValueError:
                logfire.warn(
                    "Skipping malformed member", post_id=post_id, member=member
                )
        return actors

    async def actor_post_ids(self, actor: ActorId) -> set[PostId]:
        """SMEMBERS on the actor's reverse index."""
        with _store_errors("actor_post_ids"):
            raw = await self.client.smembers(self.keys.actor_likes(actor))
        return {PostId(post_id) for post_id in raw}

    async def replace_members(self, post_id: PostId, actors: Iterable[ActorId]) -> None:
        """Rewrite a membership set and both sides of the index in one MULTI."""
        new_members = {actor.member: actor for actor in actors}
        liked_key = self.keys.post_liked(post_id)

        with _store_errors("replace_members"):
            current = await self.client.smembers(liked_key)

            pipe = self.client.pipeline(transaction=True)
            pipe.delete(liked_key)
            if new_members:
                pipe.sadd(liked_key, *new_members)
            for member in set(current) - set(new_members):
                try:
                    stale = ActorId.parse(member)
                except ValueError:
                    continue
                pipe.srem(self.keys.actor_likes(stale), post_id)
            for actor in new_members.values():
                pipe.sadd(self.keys.actor_likes(actor), post_id)
            await pipe.execute()

    async def move_member(
        self, post_id: PostId, from_actor: ActorId, to_actor: ActorId
    ) -> int:
        """Run the move script."""
        with _store_errors("move_member"):
            count = await self._move_member(
                keys=[
                    self.keys.post_likes(post_id),
                    self.keys.post_liked(post_id),
                    self.keys.actor_likes(from_actor),
                    self.keys.actor_likes(to_actor),
                ],
                args=[from_actor.member, to_actor.member, post_id],
            )
        return int(count)

    async def ping(self) -> bool:
        """PING the server."""
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logfire.warn("Redis ping failed", error=str(e))
            return False


class InMemoryCounterStore(CounterStore):
    """In-memory implementation of CounterStore for testing.

    Each method body runs without awaiting, so on a single event loop every
    operation is atomic just like a Lua script. Set ``available`` to False to
    make every call fail the way an unreachable Redis does.
    """

    def __init__(self) -> None:
        self.counts: dict[PostId, int] = {}
        self.liked: dict[PostId, set[ActorId]] = defaultdict(set)
        self.actor_index: dict[ActorId, set[PostId]] = defaultdict(set)
        self.available = True
        self.round_trips = 0

    def _check(self, operation: str) -> None:
        if not self.available:
            raise CounterStoreUnavailableError(operation, "store offline")
        self.round_trips += 1

    async def get_count(self, post_id: PostId) -> Optional[int]:
        """Read one counter."""
        self._check("get_count")
        return self.counts.get(post_id)

    async def get_counts(self, post_ids: Sequence[PostId]) -> List[Optional[int]]:
        """Read many counters."""
        if not post_ids:
            return []
        self._check("get_counts")
        return [self.counts.get(post_id) for post_id in post_ids]

    async def init_count(self, post_id: PostId, count: int) -> bool:
        """Create the counter if missing."""
        self._check("init_count")
        if post_id in self.counts:
            return False
        self.counts[post_id] = max(count, 0)
        return True

    async def set_count(self, post_id: PostId, count: int) -> None:
        """Overwrite the counter."""
        self._check("set_count")
        self.counts[post_id] = max(count, 0)

    async def toggle(self, post_id: PostId, actor: ActorId) -> tuple[int, bool]:
        """Flip the actor's like."""
        self._check("toggle")
        count = self.counts.get(post_id, 0)
        if actor in self.liked[post_id]:
            self.counts[post_id] = max(count - 1, 0)
            self.liked[post_id].discard(actor)
            self.actor_index[actor].discard(post_id)
            return self.counts[post_id], False

        self.counts[post_id] = count + 1
        self.liked[post_id].add(actor)
        self.actor_index[actor].add(post_id)
        return self.counts[post_id], True

    async def is_member(self, post_id: PostId, actor: ActorId) -> bool:
        """Check membership."""
        self._check("is_member")
        return actor in self.liked.get(post_id, set())

    async def are_members(
        self, post_ids: Sequence[PostId], actor: ActorId
    ) -> List[bool]:
        """Check membership for many posts."""
        if not post_ids:
            return []
        self._check("are_members")
        return [actor in self.liked.get(post_id, set()) for post_id in post_ids]

    async def members(self, post_id: PostId) -> set[ActorId]:
        """Return the membership set."""
        self._check("members")
        return set(self.liked.get(post_id, set()))

    async def actor_post_ids(self, actor: ActorId) -> set[PostId]:
        """Return the reverse index."""
        self._check("actor_post_ids")
        return set(self.actor_index.get(actor, set()))

    async def replace_members(self, post_id: PostId, actors: Iterable[ActorId]) -> None:
        """Overwrite the membership set and fix up indexes."""
        self._check("replace_members")
        new_members = set(actors)
        for stale in self.liked.get(post_id, set()) - new_members:
            self.actor_index[stale].discard(post_id)
        self.liked[post_id] = new_members
        for actor in new_members:
            self.actor_index[actor].add(post_id)

    async def move_member(
        self, post_id: PostId, from_actor: ActorId, to_actor: ActorId
    ) -> int:
        """Re-attribute one like."""
        self._check("move_member")
        count = self.counts.get(post_id, 0)
        self.actor_index[from_actor].discard(post_id)
        members = self.liked[post_id]
        if from_actor not in members:
            return count

        members.discard(from_actor)
        if to_actor in members:
            if count > 0:
                count -= 1
                self.counts[post_id] = count
        else:
            members.add(to_actor)
        self.actor_index[to_actor].add(post_id)
        return count

    async def ping(self) -> bool:
        """Report availability."""
        return self.available
