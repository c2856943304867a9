"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from tally.domain.model import Like, Post
from tally.domain.value import ActorId, ActorKind, LikeId, PostId


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(str(row["id"])),
        likes=max(row["likes"] or 0, 0),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict.

    Args:
        post: Post domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return post.model_dump()


def row_to_like(row: Dict[str, Any]) -> Like:
    """Convert database row to Like domain model.

    Args:
        row: Database row as dict

    Returns:
        Like domain model
    """
    return Like(
        id=LikeId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        post_id=PostId(str(row["post_id"])),
        actor=ActorId(kind=ActorKind(row["actor_kind"]), value=row["actor_value"]),
        created_at=row["created_at"],
    )


def like_to_dict(like: Like) -> Dict[str, Any]:
    """Convert Like domain model to database dict.

    The actor is flattened into its kind and value columns.

    Args:
        like: Like domain model

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": like.id,
        "post_id": like.post_id,
        "actor_kind": like.actor.kind.value,
        "actor_value": like.actor.value,
        "created_at": like.created_at,
    }
