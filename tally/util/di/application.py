"""Application layer DI providers."""

from dishka import Scope, provide

from tally.application.background import SyncDispatcher
from tally.application.usecase.counter import (
    InitializeCountersUseCase,
    ReconcileCountersUseCase,
)
from tally.application.usecase.like import (
    GetLikesUseCase,
    MergeFeedUseCase,
    MigrateSessionLikesUseCase,
    ToggleLikeUseCase,
)
from tally.config import SyncSettings
from tally.domain.service import (
    CounterService,
    DurableSyncScope,
    MergeService,
)
from tally.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.APP)
    def get_sync_dispatcher(
        self, scope: DurableSyncScope, sync_settings: SyncSettings
    ) -> SyncDispatcher:
        """Provide background sync dispatcher.

        APP-scoped: its tasks outlive the request that scheduled them.
        """
        return SyncDispatcher(scope=scope, sync_settings=sync_settings)

    # Like use cases
    @provide(scope=Scope.REQUEST)
    def get_toggle_like_use_case(
        self, counter_service: CounterService, sync_dispatcher: SyncDispatcher
    ) -> ToggleLikeUseCase:
        """Provide toggle like use case."""
        return ToggleLikeUseCase(
            counter_service=counter_service, sync_dispatcher=sync_dispatcher
        )

    @provide(scope=Scope.REQUEST)
    def get_get_likes_use_case(
        self, counter_service: CounterService
    ) -> GetLikesUseCase:
        """Provide get likes use case."""
        return GetLikesUseCase(counter_service=counter_service)

    @provide(scope=Scope.REQUEST)
    def get_merge_feed_use_case(self, merge_service: MergeService) -> MergeFeedUseCase:
        """Provide merge feed use case."""
        return MergeFeedUseCase(merge_service=merge_service)

    @provide(scope=Scope.REQUEST)
    def get_migrate_session_likes_use_case(
        self, counter_service: CounterService, sync_dispatcher: SyncDispatcher
    ) -> MigrateSessionLikesUseCase:
        """Provide migrate session likes use case."""
        return MigrateSessionLikesUseCase(
            counter_service=counter_service, sync_dispatcher=sync_dispatcher
        )

    # Counter maintenance use cases
    @provide(scope=Scope.REQUEST)
    def get_reconcile_counters_use_case(
        self, scope: DurableSyncScope, sync_settings: SyncSettings
    ) -> ReconcileCountersUseCase:
        """Provide reconcile counters use case.

        Takes the durable scope rather than the request session so each page
        of posts commits on its own.
        """
        return ReconcileCountersUseCase(sync_scope=scope, sync_settings=sync_settings)

    @provide(scope=Scope.REQUEST)
    def get_initialize_counters_use_case(
        self, counter_service: CounterService
    ) -> InitializeCountersUseCase:
        """Provide initialize counters use case."""
        return InitializeCountersUseCase(counter_service=counter_service)
