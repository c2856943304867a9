"""Toggle like use case."""

from typing import Optional

from pydantic import BaseModel

from tally.application.background import SyncDispatcher
from tally.domain.model import SyncOutcome
from tally.domain.service import CounterService
from tally.domain.value import ActorId, PostId


class ToggleLikeRequest(BaseModel):
    """Toggle like request."""

    post_id: str
    session_id: Optional[str] = None
    profile_id: Optional[str] = None  # Wins over session_id when present


class ToggleLikeResponse(BaseModel):
    """Toggle like response."""

    success: bool
    post_id: str
    likes: int
    is_liked: bool
    error: Optional[str] = None


class ToggleLikeUseCase:
    """Use case for liking or unliking a post."""

    def __init__(
        self, counter_service: CounterService, sync_dispatcher: SyncDispatcher
    ) -> None:
        """Initialize toggle like use case.

        Args:
            counter_service: Counter domain service
            sync_dispatcher: Background durable sync runner
        """
        self.counter_service = counter_service
        self.sync_dispatcher = sync_dispatcher

    async def execute(self, request: ToggleLikeRequest) -> ToggleLikeResponse:
        """Execute toggle flow.

        The durable mirror is scheduled only after the atomic store accepted
        the toggle, and is not awaited.

        Args:
            request: Toggle like request

        Returns:
            Toggle outcome; ``success`` False means nothing changed

        Raises:
            ValueError: If the request carries no actor identity
        """
        actor = ActorId.for_request(request.session_id, request.profile_id)
        post_id = PostId(request.post_id)

        result = await self.counter_service.toggle_like(post_id, actor)
        if result.success:
            self.sync_dispatcher.dispatch(
                SyncOutcome(
                    post_id=post_id,
                    actor=actor,
                    is_liked=result.is_liked,
                    new_count=result.new_count,
                )
            )

        return ToggleLikeResponse(
            success=result.success,
            post_id=post_id,
            likes=result.new_count,
            is_liked=result.is_liked,
            error=result.error,
        )
