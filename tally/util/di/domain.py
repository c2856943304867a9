"""Domain layer DI providers."""

from dishka import Scope, provide

from tally.config import CounterSettings, SyncSettings
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.service import CounterService, DurableSyncService, MergeService
from tally.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_counter_service(
        self,
        counter_store: CounterStore,
        post_repository: PostRepository,
        like_repository: LikeRepository,
        counter_settings: CounterSettings,
    ) -> CounterService:
        """Provide counter domain service."""
        return CounterService(
            counter_store=counter_store,
            post_repository=post_repository,
            like_repository=like_repository,
            counter_settings=counter_settings,
        )

    @provide
    def get_durable_sync_service(
        self,
        like_repository: LikeRepository,
        post_repository: PostRepository,
        counter_store: CounterStore,
        sync_settings: SyncSettings,
    ) -> DurableSyncService:
        """Provide durable sync domain service bound to the request session."""
        return DurableSyncService(
            like_repository=like_repository,
            post_repository=post_repository,
            counter_store=counter_store,
            sync_settings=sync_settings,
        )

    @provide
    def get_merge_service(self, counter_service: CounterService) -> MergeService:
        """Provide merge domain service."""
        return MergeService(counter_service=counter_service)
