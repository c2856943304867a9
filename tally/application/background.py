"""Fire-and-forget runner for durable sync work."""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

import logfire

from tally.config import SyncSettings
from tally.domain.model import SyncOutcome
from tally.domain.service import DurableSyncScope, DurableSyncService
from tally.domain.value import ActorId


class SyncDispatcher:
    """Schedules durable sync on detached tasks.

    The caller never awaits the work, so its latency and its success are
    unaffected by PostgreSQL. Each task opens its own durable scope. Failures
    are logged and dropped; reconciliation closes whatever gap they leave.
    """

    def __init__(self, scope: DurableSyncScope, sync_settings: SyncSettings) -> None:
        """Initialize dispatcher.

        Args:
            scope: Opens a durable sync service per task
            sync_settings: Sync settings (``enabled`` switches dispatch off)
        """
        self.scope = scope
        self.sync_settings = sync_settings
        # Strong references; the event loop only keeps weak ones
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of tasks not yet finished."""
        return len(self._tasks)

    def dispatch(self, outcome: SyncOutcome) -> Optional[asyncio.Task]:
        """Mirror a toggle outcome in the background.

        Args:
            outcome: Result of a successful toggle

        Returns:
            The scheduled task, or None when sync is disabled
        """

        async def work(service: DurableSyncService) -> None:
            await service.sync_to_durable(
                outcome.post_id, outcome.actor, outcome.is_liked, outcome.new_count
            )

        return self._spawn("durable_sync", work, post_id=outcome.post_id)

    def dispatch_migration(
        self, from_actor: ActorId, to_actor: ActorId
    ) -> Optional[asyncio.Task]:
        """Move durable like records between actors in the background.

        Waits for every task already pending, so a toggle sync for
        ``from_actor`` dispatched before this call lands before the records
        move and is carried over with them.
        """
        earlier = tuple(self._tasks)

        async def work(service: DurableSyncService) -> None:
            await service.migrate_actor_records(from_actor, to_actor)

        return self._spawn(
            "durable_migration",
            work,
            after=earlier,
            from_actor=from_actor.member,
            to_actor=to_actor.member,
        )

    async def drain(self) -> None:
        """Wait for every pending task, including ones scheduled meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(
        self,
        name: str,
        work: Callable[[DurableSyncService], Awaitable[None]],
        after: Sequence[asyncio.Task] = (),
        **context: str,
    ) -> Optional[asyncio.Task]:
        if not self.sync_settings.enabled:
            logfire.debug("Durable sync disabled, skipping", task=name, **context)
            return None

        task = asyncio.create_task(self._run(name, work, after, context), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self,
        name: str,
        work: Callable[[DurableSyncService], Awaitable[None]],
        after: Sequence[asyncio.Task],
        context: dict[str, str],
    ) -> None:
        if after:
            await asyncio.gather(*after, return_exceptions=True)
        try:
            async with self.scope.open() as service:
                await work(service)
        except Exception as e:
            logfire.error(
                "Background durable task failed",
                task=name,
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
