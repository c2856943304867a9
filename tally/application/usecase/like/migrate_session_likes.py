"""Migrate session likes use case."""

import logfire
from pydantic import BaseModel

from tally.application.background import SyncDispatcher
from tally.domain.service import CounterService
from tally.domain.value import ActorId


class MigrateSessionLikesRequest(BaseModel):
    """Migrate session likes request."""

    session_id: str
    profile_id: str


class MigrateSessionLikesResponse(BaseModel):
    """Migrate session likes response."""

    moved: int


class MigrateSessionLikesUseCase:
    """Use case for carrying anonymous likes over to a profile after login."""

    def __init__(
        self, counter_service: CounterService, sync_dispatcher: SyncDispatcher
    ) -> None:
        """Initialize migrate session likes use case.

        Args:
            counter_service: Counter domain service
            sync_dispatcher: Background durable sync runner
        """
        self.counter_service = counter_service
        self.sync_dispatcher = sync_dispatcher

    async def execute(
        self, request: MigrateSessionLikesRequest
    ) -> MigrateSessionLikesResponse:
        """Execute migration.

        The atomic store is migrated first and synchronously; the durable
        records follow in the background.

        Args:
            request: Session token and the profile it now belongs to

        Returns:
            Number of posts moved

        Raises:
            CounterStoreUnavailableError: If the atomic store cannot be reached
        """
        session = ActorId.session(request.session_id)
        profile = ActorId.profile(request.profile_id)

        with logfire.span("migrate_session_likes.execute", profile=profile.member):
            moved = await self.counter_service.migrate_actor(session, profile)
            self.sync_dispatcher.dispatch_migration(session, profile)

        return MigrateSessionLikesResponse(moved=moved)
