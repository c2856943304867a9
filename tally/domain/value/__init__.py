"""Domain value objects for Tally."""

from tally.domain.value.identifiers import LikeId, PostId
from tally.domain.value.types import ActorId, ActorKind, ReconcilePolicy

__all__ = [
    # Identifiers
    "PostId",
    "LikeId",
    # Types
    "ActorId",
    "ActorKind",
    "ReconcilePolicy",
]
