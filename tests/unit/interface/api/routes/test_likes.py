"""Unit tests for like routes."""

import pytest
from fastapi import HTTPException

from tally.application.background import SyncDispatcher
from tally.application.usecase.like import (
    GetLikesUseCase,
    MergeFeedUseCase,
    MigrateSessionLikesRequest,
    MigrateSessionLikesUseCase,
    ToggleLikeUseCase,
)
from tally.domain.repository import CounterStore
from tally.interface.api.routes.likes import (
    LookupBody,
    MergeBody,
    ToggleLikeBody,
    lookup_likes,
    merge_likes,
    migrate_likes,
    toggle_like,
)
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestToggleLikeRoute:
    """Tests for POST /posts/{post_id}/like."""

    @pytest.mark.asyncio
    async def test_returns_new_state(self, unit_env):
        """Successful toggles return the live count."""
        # Arrange
        use_case = await unit_env.get(ToggleLikeUseCase)
        dispatcher = await unit_env.get(SyncDispatcher)

        # Act
        response = await toggle_like("p1", ToggleLikeBody(session_id="anon"), use_case)
        await dispatcher.drain()

        # Assert
        assert response.success is True
        assert response.likes == 1
        assert response.is_liked is True

    @pytest.mark.asyncio
    async def test_store_outage_is_503(self, unit_env):
        """Clients roll back their optimistic update on 503."""
        # Arrange
        use_case = await unit_env.get(ToggleLikeUseCase)
        store = await unit_env.get(CounterStore)
        store.available = False

        # Act
        with pytest.raises(HTTPException) as exc_info:
            await toggle_like("p1", ToggleLikeBody(session_id="anon"), use_case)

        # Assert
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_identity_is_400(self, unit_env):
        """A body without identity is rejected."""
        use_case = await unit_env.get(ToggleLikeUseCase)

        with pytest.raises(HTTPException) as exc_info:
            await toggle_like("p1", ToggleLikeBody(), use_case)

        assert exc_info.value.status_code == 400


class TestLookupRoute:
    """Tests for POST /likes/lookup."""

    @pytest.mark.asyncio
    async def test_lookup_survives_store_outage(self, unit_env):
        """Reads answer from the durable side when Redis is down."""
        use_case = await unit_env.get(GetLikesUseCase)
        store = await unit_env.get(CounterStore)
        store.available = False

        response = await lookup_likes(
            LookupBody(post_ids=["p1"], session_id="anon"), use_case
        )

        assert response.items[0].likes == 0
        assert response.items[0].is_liked is False


class TestMergeRoute:
    """Tests for POST /likes/merge."""

    @pytest.mark.asyncio
    async def test_merge_passthrough_fields(self, unit_env):
        """Unrelated fields survive the merge."""
        use_case = await unit_env.get(MergeFeedUseCase)

        response = await merge_likes(
            MergeBody(items=[{"id": "p1", "image": "x.png"}]), use_case
        )

        assert response.items == [
            {"id": "p1", "image": "x.png", "likes": 0, "is_liked": False}
        ]


class TestMigrateRoute:
    """Tests for POST /likes/migrate."""

    @pytest.mark.asyncio
    async def test_store_outage_is_503(self, unit_env):
        """Migration cannot run without Redis."""
        use_case = await unit_env.get(MigrateSessionLikesUseCase)
        store = await unit_env.get(CounterStore)
        store.available = False

        with pytest.raises(HTTPException) as exc_info:
            await migrate_likes(
                MigrateSessionLikesRequest(session_id="anon", profile_id="u1"),
                use_case,
            )

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_blank_identity_is_400(self, unit_env):
        """Whitespace identities are rejected."""
        use_case = await unit_env.get(MigrateSessionLikesUseCase)

        with pytest.raises(HTTPException) as exc_info:
            await migrate_likes(
                MigrateSessionLikesRequest(session_id="  ", profile_id="u1"),
                use_case,
            )

        assert exc_info.value.status_code == 400
