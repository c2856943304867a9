"""Domain model entities for Tally."""

from tally.domain.model.like import Like
from tally.domain.model.outcome import ReconcileReport, SyncOutcome, ToggleResult
from tally.domain.model.post import Post

__all__ = [
    "Post",
    "Like",
    "ToggleResult",
    "SyncOutcome",
    "ReconcileReport",
]
