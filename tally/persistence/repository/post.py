"""PostgreSQL implementation of Post repository."""

from typing import List, Optional, Sequence

import logfire
from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.model import Post
from tally.domain.repository.post import PostRepository
from tally.domain.value import PostId
from tally.persistence.mappers import post_to_dict, row_to_post
from tally.persistence.tables import posts_table


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        stmt = select(posts_table).where(posts_table.c.id == post_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def find_all(self, limit: int = 200, offset: int = 0) -> List[Post]:
        """Page through all posts ordered by ID."""
        stmt = (
            select(posts_table)
            .order_by(posts_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_post(row._asdict()) for row in result.fetchall()]

    async def get_like_counts(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Read like counts for several posts (batch query)."""
        if not post_ids:
            return {}

        stmt = select(posts_table.c.id, posts_table.c.likes).where(
            posts_table.c.id.in_(list(post_ids))
        )
        result = await self.session.execute(stmt)
        return {PostId(row.id): max(row.likes or 0, 0) for row in result.fetchall()}

    async def set_like_count(self, post_id: PostId, count: int) -> bool:
        """SET the like count (never increment)."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(likes=max(count, 0), updated_at=func.now())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        updated = result.rowcount > 0  # type: ignore[attr-defined]
        if not updated:
            logfire.warn("Like count update hit no post", post_id=post_id)
        return updated

    async def save(self, post: Post) -> Post:
        """Save a post (create or replace)."""
        post_dict = post_to_dict(post)
        stmt = insert(posts_table).values(**post_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[posts_table.c.id],
            set_={
                "likes": stmt.excluded.likes,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return post
