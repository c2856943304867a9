"""Unit tests for InitializeCountersUseCase."""

import pytest

from tally.application.usecase.counter import (
    InitializeCountersRequest,
    InitializeCountersUseCase,
)
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.value import ActorId, PostId
from tests.conftest import seed_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestInitializeCountersUseCase:
    """Tests for InitializeCountersUseCase."""

    @pytest.mark.asyncio
    async def test_full_cold_start(self, unit_env):
        """Everything in PostgreSQL is loaded into Redis."""
        # Arrange
        use_case = await unit_env.get(InitializeCountersUseCase)
        store = await unit_env.get(CounterStore)
        post_repo = await unit_env.get(PostRepository)
        like_repo = await unit_env.get(LikeRepository)
        await seed_post(post_repo, "p1", likes=1)
        await like_repo.upsert(PostId("p1"), ActorId.profile("u1"))

        # Act
        response = await use_case.execute(InitializeCountersRequest())

        # Assert
        assert response.seeded == 1
        assert await store.get_count(PostId("p1")) == 1
        assert await store.members(PostId("p1")) == {ActorId.profile("u1")}

    @pytest.mark.asyncio
    async def test_counts_only_keeps_membership(self, unit_env):
        """Counts-only reseeding leaves sets untouched."""
        # Arrange
        use_case = await unit_env.get(InitializeCountersUseCase)
        store = await unit_env.get(CounterStore)
        post_repo = await unit_env.get(PostRepository)
        await seed_post(post_repo, "p1", likes=6)
        await store.toggle(PostId("p1"), ActorId.session("s"))

        # Act
        response = await use_case.execute(
            InitializeCountersRequest(post_ids=["p1"], counts_only=True)
        )

        # Assert
        assert response.seeded == 1
        assert await store.get_count(PostId("p1")) == 6
        assert await store.members(PostId("p1")) == {ActorId.session("s")}

    @pytest.mark.asyncio
    async def test_counts_only_needs_post_ids(self, unit_env):
        """Reseeding counts for everything is refused."""
        use_case = await unit_env.get(InitializeCountersUseCase)

        with pytest.raises(ValueError):
            await use_case.execute(InitializeCountersRequest(counts_only=True))
