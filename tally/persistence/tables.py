"""SQLAlchemy table definitions for Tally.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# POSTS TABLE (durable copy of like counts)
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", String(64), primary_key=True),
    # Last count synced from Redis, always SET never incremented
    Column("likes", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("likes >= 0", name="likes_non_negative"),
)

# ============================================================================
# POST_LIKES TABLE (one row per liked post per actor)
# ============================================================================
post_likes_table = Table(
    "post_likes",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "post_id",
        String(64),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("actor_kind", String(16), nullable=False),  # 'session', 'profile'
    Column("actor_value", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("post_id", "actor_kind", "actor_value", name="uq_post_like"),
    CheckConstraint("actor_kind IN ('session', 'profile')", name="valid_actor_kind"),
)

Index("idx_post_likes_post_id", post_likes_table.c.post_id)
Index(
    "idx_post_likes_actor",
    post_likes_table.c.actor_kind,
    post_likes_table.c.actor_value,
)
