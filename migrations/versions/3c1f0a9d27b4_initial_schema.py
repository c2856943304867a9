"""initial_schema

Create the durable side of the like counters:
- Posts (id and the last like count synced from Redis)
- Post likes (one row per post per actor, session or profile)

Revision ID: 3c1f0a9d27b4
Revises:
Create Date: 2026-10-19 10:12:44.318021

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d27b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # POSTS table (durable copy of like counts)
    # ========================================================================
    op.create_table(
        "posts",
        sa.Column("id", sa.String(64), nullable=False),
        # Always SET from the Redis counter, never incremented
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("likes >= 0", name="likes_non_negative"),
    )

    # ========================================================================
    # POST_LIKES table (session and profile likes side by side)
    # ========================================================================
    op.create_table(
        "post_likes",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("post_id", sa.String(64), nullable=False),
        sa.Column("actor_kind", sa.String(16), nullable=False),  # 'session', 'profile'
        sa.Column("actor_value", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "post_id", "actor_kind", "actor_value", name="uq_post_like"
        ),
        sa.CheckConstraint(
            "actor_kind IN ('session', 'profile')", name="valid_actor_kind"
        ),
    )
    op.create_index("idx_post_likes_post_id", "post_likes", ["post_id"])
    # Session to profile migration scans by actor
    op.create_index(
        "idx_post_likes_actor", "post_likes", ["actor_kind", "actor_value"]
    )

    # Trigger function to update updated_at timestamp
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    op.execute("""
        CREATE TRIGGER update_posts_updated_at
        BEFORE UPDATE ON posts
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS update_posts_updated_at ON posts")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    op.drop_index("idx_post_likes_actor", table_name="post_likes")
    op.drop_index("idx_post_likes_post_id", table_name="post_likes")
    op.drop_table("post_likes")
    op.drop_table("posts")
