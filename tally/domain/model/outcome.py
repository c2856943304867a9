"""Results passed between the counter engine and its callers."""

from typing import Optional

from pydantic import Field

from tally.domain.model.common import DomainModel
from tally.domain.value import ActorId, PostId, ReconcilePolicy


class ToggleResult(DomainModel):
    """Outcome of a toggle on the atomic store.

    When ``success`` is False nothing changed and ``new_count``/``is_liked``
    carry no information; callers roll back optimistic updates.
    """

    success: bool
    new_count: int = 0
    is_liked: bool = False
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "ToggleResult":
        return cls(success=False, error=error)


class SyncOutcome(DomainModel):
    """Unit of durable sync work produced by a successful toggle."""

    post_id: PostId
    actor: ActorId
    is_liked: bool
    new_count: int = Field(ge=0)


class ReconcileReport(DomainModel):
    """What reconciliation found for one post and what it did about it."""

    post_id: PostId
    policy: ReconcilePolicy
    atomic_count: Optional[int] = None  # None when Redis had no counter
    durable_count: Optional[int] = None  # None when the post row is missing
    corrected: bool = False
    error: Optional[str] = None

    @property
    def drift(self) -> int:
        """Atomic minus durable count (missing values count as zero)."""
        return (self.atomic_count or 0) - (self.durable_count or 0)
