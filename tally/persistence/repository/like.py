"""PostgreSQL implementation of Like repository."""

from datetime import datetime
from typing import List, Sequence
from uuid import uuid4

from sqlalchemy import and_, delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.model import Like
from tally.domain.repository.like import LikeRepository
from tally.domain.value import ActorId, LikeId, PostId
from tally.persistence.mappers import like_to_dict, row_to_like
from tally.persistence.tables import post_likes_table


def _is_actor(actor: ActorId):
    """WHERE clause matching one actor."""
    return and_(
        post_likes_table.c.actor_kind == actor.kind.value,
        post_likes_table.c.actor_value == actor.value,
    )


class PostgresLikeRepository(LikeRepository):
    """PostgreSQL implementation of LikeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def exists(self, post_id: PostId, actor: ActorId) -> bool:
        """Check whether a like record exists."""
        stmt = (
            select(post_likes_table.c.id)
            .where(and_(post_likes_table.c.post_id == post_id, _is_actor(actor)))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find_liked_post_ids(
        self, actor: ActorId, post_ids: Sequence[PostId]
    ) -> set[PostId]:
        """Find which of the given posts an actor likes (batch query)."""
        if not post_ids:
            return set()

        stmt = select(post_likes_table.c.post_id).where(
            and_(
                _is_actor(actor),
                post_likes_table.c.post_id.in_(list(post_ids)),
            )
        )
        result = await self.session.execute(stmt)
        return {PostId(row.post_id) for row in result.fetchall()}

    async def find_by_post(self, post_id: PostId) -> List[Like]:
        """Find all likes on a post."""
        stmt = select(post_likes_table).where(post_likes_table.c.post_id == post_id)
        result = await self.session.execute(stmt)
        return [row_to_like(row._asdict()) for row in result.fetchall()]

    async def find_by_posts(self, post_ids: Sequence[PostId]) -> List[Like]:
        """Find all likes on several posts."""
        if not post_ids:
            return []

        stmt = select(post_likes_table).where(
            post_likes_table.c.post_id.in_(list(post_ids))
        )
        result = await self.session.execute(stmt)
        return [row_to_like(row._asdict()) for row in result.fetchall()]

    async def find_by_actor(self, actor: ActorId) -> List[Like]:
        """Find all likes by an actor."""
        stmt = select(post_likes_table).where(_is_actor(actor))
        result = await self.session.execute(stmt)
        return [row_to_like(row._asdict()) for row in result.fetchall()]

    async def upsert(self, post_id: PostId, actor: ActorId) -> bool:
        """INSERT ... ON CONFLICT DO NOTHING."""
        like = Like(
            id=LikeId(uuid4()),
            post_id=post_id,
            actor=actor,
            created_at=datetime.now(),
        )
        stmt = (
            insert(post_likes_table)
            .values(**like_to_dict(like))
            .on_conflict_do_nothing(constraint="uq_post_like")
            .returning(post_likes_table.c.id)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.first() is not None

    async def delete(self, post_id: PostId, actor: ActorId) -> bool:
        """Delete a like."""
        stmt = delete(post_likes_table).where(
            and_(post_likes_table.c.post_id == post_id, _is_actor(actor))
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def reassign_actor(self, from_actor: ActorId, to_actor: ActorId) -> int:
        """Move likes between actors, dropping ones the target already has."""
        already_liked = select(post_likes_table.c.post_id).where(_is_actor(to_actor))
        await self.session.execute(
            delete(post_likes_table).where(
                and_(
                    _is_actor(from_actor),
                    post_likes_table.c.post_id.in_(already_liked),
                )
            )
        )

        result = await self.session.execute(
            update(post_likes_table)
            .where(_is_actor(from_actor))
            .values(actor_kind=to_actor.kind.value, actor_value=to_actor.value)
        )
        await self.session.flush()
        return result.rowcount  # type: ignore[attr-defined]
