"""Integration tests for RedisCounterStore.

Runs the Lua scripts against a real Redis at REDIS__URL. Skipped when no
server is reachable. Every test uses its own key prefix and cleans up.
"""

import asyncio
from uuid import uuid4

import pytest
import pytest_asyncio

from tally.adapter.redis import CounterKeys, RedisCounterStore, create_redis
from tally.config import Settings
from tally.domain.value import ActorId, PostId


@pytest_asyncio.fixture
async def redis_store():
    client = create_redis(Settings().redis)
    if not await RedisCounterStore(client, CounterKeys()).ping():
        await client.aclose()
        pytest.skip("Redis not reachable")

    prefix = f"test:{uuid4().hex}:"
    yield RedisCounterStore(client, CounterKeys(prefix=prefix))

    keys = [key async for key in client.scan_iter(match=f"{prefix}*")]
    if keys:
        await client.delete(*keys)
    await client.aclose()


class TestRedisCounterStoreIntegration:
    """Integration tests for the Redis-backed counter store."""

    @pytest.mark.asyncio
    async def test_toggle_round_trip(self, redis_store):
        """Like then unlike through the toggle script."""
        post_id = PostId("p1")
        actor = ActorId.session("s1")

        assert await redis_store.toggle(post_id, actor) == (1, True)
        assert await redis_store.actor_post_ids(actor) == {post_id}
        assert await redis_store.toggle(post_id, actor) == (0, False)
        assert await redis_store.members(post_id) == set()

    @pytest.mark.asyncio
    async def test_concurrent_toggles_lose_nothing(self, redis_store):
        """Distinct actors toggling at once each land exactly once."""
        post_id = PostId("p1")
        actors = [ActorId.session(f"s{i}") for i in range(100)]

        results = await asyncio.gather(
            *(redis_store.toggle(post_id, actor) for actor in actors)
        )

        assert sorted(count for count, _ in results) == list(range(1, 101))
        assert await redis_store.get_count(post_id) == 100
        assert len(await redis_store.members(post_id)) == 100

    @pytest.mark.asyncio
    async def test_same_actor_racing_itself_stays_consistent(self, redis_store):
        """An even number of toggles by one actor ends unliked."""
        post_id = PostId("p1")
        actor = ActorId.session("s1")

        await asyncio.gather(*(redis_store.toggle(post_id, actor) for _ in range(10)))

        assert await redis_store.get_count(post_id) == 0
        assert await redis_store.is_member(post_id, actor) is False

    @pytest.mark.asyncio
    async def test_move_member_merges_duplicates(self, redis_store):
        """Moving onto an actor that already liked decrements once."""
        post_id = PostId("p1")
        session = ActorId.session("anon")
        profile = ActorId.profile("u1")
        await redis_store.toggle(post_id, session)
        await redis_store.toggle(post_id, profile)

        count = await redis_store.move_member(post_id, session, profile)

        assert count == 1
        assert await redis_store.members(post_id) == {profile}
        assert await redis_store.actor_post_ids(session) == set()

    @pytest.mark.asyncio
    async def test_replace_members_and_batch_reads(self, redis_store):
        """Seeding rewrites sets and batch reads see the result."""
        a, b = ActorId.session("a"), ActorId.profile("b")
        await redis_store.toggle(PostId("p1"), a)

        await redis_store.replace_members(PostId("p1"), [b])
        await redis_store.set_count(PostId("p1"), 1)

        assert await redis_store.get_counts([PostId("p1"), PostId("p2")]) == [1, None]
        assert await redis_store.are_members([PostId("p1"), PostId("p2")], b) == [
            True,
            False,
        ]
        assert await redis_store.actor_post_ids(a) == set()
        assert await redis_store.init_count(PostId("p1"), 50) is False
