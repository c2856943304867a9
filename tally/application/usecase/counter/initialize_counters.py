"""Initialize counters use case."""

from typing import Optional

from pydantic import BaseModel, Field

from tally.application.usecase.base import BaseUseCase
from tally.domain.service import CounterService
from tally.domain.value import PostId


class InitializeCountersRequest(BaseModel):
    """Initialize counters request."""

    post_ids: Optional[list[str]] = None  # None seeds every post
    counts_only: bool = False  # Reseed counters without rebuilding sets
    batch_size: int = Field(default=200, ge=1)


class InitializeCountersResponse(BaseModel):
    """Initialize counters response."""

    seeded: int


class InitializeCountersUseCase(BaseUseCase):
    """Use case for seeding the atomic store from the durable store.

    Overwrites live state. Only for cold start or operator recovery.
    """

    def __init__(self, counter_service: CounterService) -> None:
        """Initialize use case.

        Args:
            counter_service: Counter domain service
        """
        self.counter_service = counter_service

    async def execute(
        self, request: InitializeCountersRequest
    ) -> InitializeCountersResponse:
        """Execute seeding.

        Args:
            request: Posts to seed and how

        Returns:
            Number of posts seeded

        Raises:
            ValueError: If counts_only is set without explicit post IDs
            NotFoundError: If counts_only names a post the durable store lacks
            CounterStoreUnavailableError: If the atomic store cannot be reached
        """
        if request.counts_only:
            if not request.post_ids:
                raise ValueError("counts_only requires explicit post IDs")
            for post_id in request.post_ids:
                await self.counter_service.sync_counter_from_durable(PostId(post_id))
            return InitializeCountersResponse(seeded=len(request.post_ids))

        post_ids = [PostId(p) for p in request.post_ids] if request.post_ids else None
        seeded = await self.counter_service.initialize_counters_from_durable(
            post_ids, batch_size=request.batch_size
        )
        return InitializeCountersResponse(seeded=seeded)
