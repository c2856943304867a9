"""Reconcile counters use case."""

from typing import Any, Awaitable, Callable, Optional

import logfire
from pydantic import BaseModel

from tally.application.usecase.base import BaseUseCase
from tally.config import SyncSettings
from tally.domain.model import ReconcileReport
from tally.domain.service import DurableSyncScope, DurableSyncService
from tally.domain.value import PostId, ReconcilePolicy


class ReconcileCountersRequest(BaseModel):
    """Reconcile counters request."""

    post_id: Optional[str] = None  # None reconciles every post
    policy: Optional[ReconcilePolicy] = None  # None uses the configured default


class ReconcileCountersResponse(BaseModel):
    """Reconcile counters response."""

    reports: list[ReconcileReport]
    corrected: int
    failed: int


class ReconcileCountersUseCase(BaseUseCase):
    """Use case for detecting and correcting count drift between stores."""

    def __init__(
        self, sync_scope: DurableSyncScope, sync_settings: SyncSettings
    ) -> None:
        """Initialize reconcile counters use case.

        Args:
            sync_scope: Opens a durable sync service per unit of work
            sync_settings: Sync settings (page size and default policy)
        """
        self.sync_scope = sync_scope
        self.sync_settings = sync_settings

    async def execute(
        self, request: ReconcileCountersRequest
    ) -> ReconcileCountersResponse:
        """Execute reconciliation.

        Every page of posts is committed on its own, so a failed durable
        write only loses its own page.

        Args:
            request: One post or all, and the policy to apply

        Returns:
            Per-post reports with totals
        """
        policy = request.policy or self.sync_settings.default_policy

        if request.post_id:
            reports = await self._run_unit(
                _reconcile_post, PostId(request.post_id), policy
            )
        else:
            reports = []
            batch_size = self.sync_settings.reconcile_batch_size
            offset = 0
            while True:
                page = await self._run_unit(_reconcile_page, offset, policy)
                reports.extend(page)
                offset += len(page)
                if len(page) < batch_size:
                    break

        return ReconcileCountersResponse(
            reports=reports,
            corrected=sum(1 for r in reports if r.corrected),
            failed=sum(1 for r in reports if r.error),
        )

    async def _run_unit(
        self, work: Callable[..., Awaitable[list[ReconcileReport]]], *args: Any
    ) -> list[ReconcileReport]:
        """Run ``work(service, *args)`` in its own unit of work.

        If the commit fails, corrections written to the durable store are
        reported as failed. Corrections written to Redis already happened.
        """
        reports: Optional[list[ReconcileReport]] = None
        try:
            async with self.sync_scope.open() as service:
                reports = await work(service, *args)
        except Exception as e:
            if reports is None:
                raise
            logfire.error(
                "Reconcile commit failed", posts=len(reports), error=str(e)
            )
            return [_commit_failed(report, e) for report in reports]
        return reports


async def _reconcile_post(
    service: DurableSyncService, post_id: PostId, policy: ReconcilePolicy
) -> list[ReconcileReport]:
    return [await service.reconcile_counter(post_id, policy)]


async def _reconcile_page(
    service: DurableSyncService, offset: int, policy: ReconcilePolicy
) -> list[ReconcileReport]:
    return await service.reconcile_page(offset, policy)


def _commit_failed(report: ReconcileReport, error: Exception) -> ReconcileReport:
    if report.corrected and report.policy == ReconcilePolicy.ATOMIC_WINS:
        return report.model_copy(
            update={"corrected": False, "error": f"durable commit failed: {error}"}
        )
    return report
