"""Unit tests for the SQL the PostgreSQL repositories emit.

Statements are captured from a mocked session and compiled with the
PostgreSQL dialect, so no database is needed.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from tally.domain.value import ActorId, PostId
from tally.persistence.repository import PostgresLikeRepository, PostgresPostRepository


def make_session(rowcount: int = 1, first=None):
    """Session whose execute returns a canned result."""
    result = MagicMock()
    result.rowcount = rowcount
    result.first.return_value = first
    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    session.flush = AsyncMock()
    return session


def compiled(session, call: int = 0) -> str:
    stmt = session.execute.await_args_list[call].args[0]
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestPostgresLikeRepository:
    """SQL emitted by PostgresLikeRepository."""

    @pytest.mark.asyncio
    async def test_upsert_ignores_conflicts(self):
        """Upsert is INSERT ... ON CONFLICT DO NOTHING on the unique key."""
        session = make_session(first=("some-id",))
        repo = PostgresLikeRepository(session)

        inserted = await repo.upsert(PostId("p1"), ActorId.session("s"))

        assert inserted is True
        sql = compiled(session)
        assert "INSERT INTO post_likes" in sql
        assert "ON CONFLICT ON CONSTRAINT uq_post_like DO NOTHING" in sql

    @pytest.mark.asyncio
    async def test_upsert_conflict_reports_not_inserted(self):
        """No returned row means the record already existed."""
        session = make_session(first=None)
        repo = PostgresLikeRepository(session)

        assert await repo.upsert(PostId("p1"), ActorId.session("s")) is False

    @pytest.mark.asyncio
    async def test_delete_absent_is_false(self):
        """Zero affected rows is not an error."""
        session = make_session(rowcount=0)
        repo = PostgresLikeRepository(session)

        assert await repo.delete(PostId("p1"), ActorId.session("s")) is False

    @pytest.mark.asyncio
    async def test_reassign_drops_duplicates_then_updates(self):
        """Conflicting rows are deleted before the actor is rewritten."""
        session = make_session(rowcount=2)
        repo = PostgresLikeRepository(session)

        moved = await repo.reassign_actor(ActorId.session("s"), ActorId.profile("p"))

        assert moved == 2
        assert compiled(session, 0).startswith("DELETE FROM post_likes")
        assert compiled(session, 1).startswith("UPDATE post_likes")


class TestPostgresPostRepository:
    """SQL emitted by PostgresPostRepository."""

    @pytest.mark.asyncio
    async def test_set_like_count_is_absolute(self):
        """The count is SET to a value, never incremented."""
        session = make_session(rowcount=1)
        repo = PostgresPostRepository(session)

        updated = await repo.set_like_count(PostId("p1"), 5)

        assert updated is True
        stmt = session.execute.await_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert params["likes"] == 5
        assert "likes + " not in compiled(session)

    @pytest.mark.asyncio
    async def test_set_like_count_clamps_negative(self):
        """Negative counts are written as zero."""
        session = make_session(rowcount=1)
        repo = PostgresPostRepository(session)

        await repo.set_like_count(PostId("p1"), -3)

        stmt = session.execute.await_args.args[0]
        assert stmt.compile(dialect=postgresql.dialect()).params["likes"] == 0

    @pytest.mark.asyncio
    async def test_get_like_counts_empty_skips_query(self):
        """No IDs, no query."""
        session = make_session()
        repo = PostgresPostRepository(session)

        assert await repo.get_like_counts([]) == {}
        session.execute.assert_not_awaited()
