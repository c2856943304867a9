"""Mock persistence providers for testing."""

from dishka import Scope, provide

from tally.config import SyncSettings
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.service import DurableSyncScope
from tally.persistence.repository.inmemory import (
    InMemoryLikeRepository,
    InMemoryPostRepository,
)
from tally.persistence.scope import InMemoryDurableSyncScope
from tally.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope so background sync tasks see the same rows as the test.
    The container is rebuilt for every test, which keeps tests isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_post_repository(self) -> PostRepository:
        """Provide in-memory post repository."""
        return InMemoryPostRepository()

    @provide(scope=Scope.APP)
    def get_like_repository(self) -> LikeRepository:
        """Provide in-memory like repository."""
        return InMemoryLikeRepository()

    @provide(scope=Scope.APP)
    def get_durable_sync_scope(
        self,
        like_repository: LikeRepository,
        post_repository: PostRepository,
        counter_store: CounterStore,
        sync_settings: SyncSettings,
    ) -> DurableSyncScope:
        """Provide durable scope over the shared in-memory repositories."""
        return InMemoryDurableSyncScope(
            like_repository=like_repository,
            post_repository=post_repository,
            counter_store=counter_store,
            sync_settings=sync_settings,
        )
