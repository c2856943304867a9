"""Units of work for background durable sync."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tally.config import SyncSettings
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.service import DurableSyncScope, DurableSyncService
from tally.persistence.database import get_session
from tally.persistence.repository import PostgresLikeRepository, PostgresPostRepository


class PostgresDurableSyncScope(DurableSyncScope):
    """Opens a fresh database session per background task."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        counter_store: CounterStore,
        sync_settings: SyncSettings,
    ) -> None:
        self.session_factory = session_factory
        self.counter_store = counter_store
        self.sync_settings = sync_settings

    @asynccontextmanager
    async def open(self) -> AsyncIterator[DurableSyncService]:
        async with get_session(self.session_factory) as session:
            yield DurableSyncService(
                like_repository=PostgresLikeRepository(session),
                post_repository=PostgresPostRepository(session),
                counter_store=self.counter_store,
                sync_settings=self.sync_settings,
            )


class InMemoryDurableSyncScope(DurableSyncScope):
    """Shares long-lived in-memory repositories across background tasks."""

    def __init__(
        self,
        like_repository: LikeRepository,
        post_repository: PostRepository,
        counter_store: CounterStore,
        sync_settings: SyncSettings,
    ) -> None:
        self.like_repository = like_repository
        self.post_repository = post_repository
        self.counter_store = counter_store
        self.sync_settings = sync_settings

    @asynccontextmanager
    async def open(self) -> AsyncIterator[DurableSyncService]:
        yield DurableSyncService(
            like_repository=self.like_repository,
            post_repository=self.post_repository,
            counter_store=self.counter_store,
            sync_settings=self.sync_settings,
        )
