"""Unit tests for InMemoryPostRepository."""

import pytest

from tally.domain.value import PostId
from tally.persistence.repository.inmemory.post import InMemoryPostRepository
from tests.conftest import seed_post


class TestInMemoryPostRepository:
    """Unit tests for durable post count semantics."""

    @pytest.mark.asyncio
    async def test_set_like_count_overwrites(self):
        """Counts are SET, not incremented."""
        repo = InMemoryPostRepository()
        await seed_post(repo, "p1", likes=10)

        await repo.set_like_count(PostId("p1"), 3)

        assert (await repo.find_by_id(PostId("p1"))).likes == 3

    @pytest.mark.asyncio
    async def test_set_like_count_clamps_negative(self):
        """Negative counts are stored as zero."""
        repo = InMemoryPostRepository()
        await seed_post(repo, "p1", likes=1)

        await repo.set_like_count(PostId("p1"), -4)

        assert (await repo.find_by_id(PostId("p1"))).likes == 0

    @pytest.mark.asyncio
    async def test_set_like_count_unknown_post(self):
        """Unknown posts are reported, not created."""
        repo = InMemoryPostRepository()

        assert await repo.set_like_count(PostId("ghost"), 1) is False
        assert await repo.find_by_id(PostId("ghost")) is None

    @pytest.mark.asyncio
    async def test_get_like_counts_omits_unknown(self):
        """Only existing posts appear in batch reads."""
        repo = InMemoryPostRepository()
        await seed_post(repo, "p1", likes=2)

        counts = await repo.get_like_counts([PostId("p1"), PostId("ghost")])

        assert counts == {PostId("p1"): 2}

    @pytest.mark.asyncio
    async def test_find_all_pages_in_id_order(self):
        """Paging is stable by ID."""
        repo = InMemoryPostRepository()
        for post_id in ("c", "a", "b"):
            await seed_post(repo, post_id)

        first = await repo.find_all(limit=2)
        second = await repo.find_all(limit=2, offset=2)

        assert [p.id for p in first] == ["a", "b"]
        assert [p.id for p in second] == ["c"]
