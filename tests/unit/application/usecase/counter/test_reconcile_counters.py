"""Unit tests for ReconcileCountersUseCase."""

from contextlib import asynccontextmanager

import pytest

from tally.application.usecase.counter import (
    ReconcileCountersRequest,
    ReconcileCountersUseCase,
)
from tally.config import SyncSettings
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.value import PostId, ReconcilePolicy
from tally.persistence.scope import InMemoryDurableSyncScope
from tests.conftest import seed_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class CountingScope(InMemoryDurableSyncScope):
    """In-memory scope that counts units of work and can fail the first commit."""

    def __init__(self, *args, fail_first_commit: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.opened = 0
        self.fail_first_commit = fail_first_commit

    @asynccontextmanager
    async def open(self):
        self.opened += 1
        async with super().open() as service:
            yield service
        if self.fail_first_commit and self.opened == 1:
            raise RuntimeError("commit failed")


async def make_use_case(unit_env, batch_size: int, fail_first_commit: bool = False):
    settings = SyncSettings(reconcile_batch_size=batch_size)
    scope = CountingScope(
        like_repository=await unit_env.get(LikeRepository),
        post_repository=await unit_env.get(PostRepository),
        counter_store=await unit_env.get(CounterStore),
        sync_settings=settings,
        fail_first_commit=fail_first_commit,
    )
    return ReconcileCountersUseCase(sync_scope=scope, sync_settings=settings), scope


class TestReconcileCountersUseCase:
    """Tests for ReconcileCountersUseCase."""

    @pytest.mark.asyncio
    async def test_single_post(self, unit_env):
        """A post ID limits the run to that post."""
        # Arrange
        use_case = await unit_env.get(ReconcileCountersUseCase)
        store = await unit_env.get(CounterStore)
        post_repo = await unit_env.get(PostRepository)
        await seed_post(post_repo, "p1", likes=1)
        await seed_post(post_repo, "p2", likes=1)
        await store.set_count(PostId("p1"), 4)
        await store.set_count(PostId("p2"), 4)

        # Act
        response = await use_case.execute(
            ReconcileCountersRequest(post_id="p1", policy=ReconcilePolicy.ATOMIC_WINS)
        )

        # Assert
        assert len(response.reports) == 1
        assert response.corrected == 1
        assert (await post_repo.find_by_id(PostId("p2"))).likes == 1

    @pytest.mark.asyncio
    async def test_all_posts_with_default_policy(self, unit_env):
        """Without a post ID every post is reconciled."""
        # Arrange
        use_case = await unit_env.get(ReconcileCountersUseCase)
        store = await unit_env.get(CounterStore)
        post_repo = await unit_env.get(PostRepository)
        await seed_post(post_repo, "p1", likes=1)
        await seed_post(post_repo, "p2", likes=1)
        await store.set_count(PostId("p1"), 4)

        # Act
        response = await use_case.execute(ReconcileCountersRequest())

        # Assert
        assert len(response.reports) == 2
        assert response.corrected == 2
        assert response.failed == 0
        assert (await post_repo.find_by_id(PostId("p1"))).likes == 4
        assert await store.get_count(PostId("p2")) == 1

    @pytest.mark.asyncio
    async def test_each_page_is_its_own_unit_of_work(self, unit_env):
        """Pages are committed separately."""
        # Arrange
        use_case, scope = await make_use_case(unit_env, batch_size=2)
        post_repo = await unit_env.get(PostRepository)
        for i in range(5):
            await seed_post(post_repo, f"p{i}", likes=0)

        # Act
        response = await use_case.execute(ReconcileCountersRequest())

        # Assert
        assert len(response.reports) == 5
        assert scope.opened == 3

    @pytest.mark.asyncio
    async def test_failed_commit_only_loses_its_page(self, unit_env):
        """Durable corrections in a page that fails to commit are reported failed."""
        # Arrange
        use_case, _ = await make_use_case(
            unit_env, batch_size=1, fail_first_commit=True
        )
        store = await unit_env.get(CounterStore)
        post_repo = await unit_env.get(PostRepository)
        await seed_post(post_repo, "p1", likes=1)
        await seed_post(post_repo, "p2", likes=1)
        await store.set_count(PostId("p1"), 4)
        await store.set_count(PostId("p2"), 4)

        # Act
        response = await use_case.execute(
            ReconcileCountersRequest(policy=ReconcilePolicy.ATOMIC_WINS)
        )

        # Assert
        first, second = response.reports
        assert first.corrected is False
        assert "commit failed" in first.error
        assert second.corrected is True
        assert response.failed == 1
        assert response.corrected == 1
