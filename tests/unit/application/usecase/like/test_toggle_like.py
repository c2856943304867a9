"""Unit tests for ToggleLikeUseCase."""

import pytest

from tally.application.background import SyncDispatcher
from tally.application.usecase.like import ToggleLikeRequest, ToggleLikeUseCase
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.value import ActorId, PostId
from tests.conftest import seed_post
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestToggleLikeUseCase:
    """Tests for ToggleLikeUseCase."""

    @pytest.mark.asyncio
    async def test_successful_toggle_dispatches_durable_sync(self, unit_env):
        """The durable mirror follows a successful toggle."""
        # Arrange
        use_case = await unit_env.get(ToggleLikeUseCase)
        dispatcher = await unit_env.get(SyncDispatcher)
        post_repo = await unit_env.get(PostRepository)
        like_repo = await unit_env.get(LikeRepository)
        await seed_post(post_repo, "p1", likes=2)

        # Act
        response = await use_case.execute(
            ToggleLikeRequest(post_id="p1", session_id="anon")
        )
        await dispatcher.drain()

        # Assert
        assert response.success is True
        assert response.likes == 3
        assert response.is_liked is True
        assert await like_repo.exists(PostId("p1"), ActorId.session("anon"))
        assert (await post_repo.find_by_id(PostId("p1"))).likes == 3

    @pytest.mark.asyncio
    async def test_profile_identity_preferred(self, unit_env):
        """Authenticated toggles are recorded against the profile."""
        # Arrange
        use_case = await unit_env.get(ToggleLikeUseCase)
        store = await unit_env.get(CounterStore)

        # Act
        await use_case.execute(
            ToggleLikeRequest(post_id="p1", session_id="anon", profile_id="u1")
        )

        # Assert
        assert await store.members(PostId("p1")) == {ActorId.profile("u1")}

    @pytest.mark.asyncio
    async def test_failed_toggle_dispatches_nothing(self, unit_env):
        """No durable write when the atomic store rejected the toggle."""
        # Arrange
        use_case = await unit_env.get(ToggleLikeUseCase)
        dispatcher = await unit_env.get(SyncDispatcher)
        store = await unit_env.get(CounterStore)
        store.available = False

        # Act
        response = await use_case.execute(
            ToggleLikeRequest(post_id="p1", session_id="anon")
        )

        # Assert
        assert response.success is False
        assert response.error
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_missing_identity_raises(self, unit_env):
        """Toggling needs a session or a profile."""
        use_case = await unit_env.get(ToggleLikeUseCase)

        with pytest.raises(ValueError):
            await use_case.execute(ToggleLikeRequest(post_id="p1"))
