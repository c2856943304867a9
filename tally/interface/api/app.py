"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logfire

from tally.application.background import SyncDispatcher
from tally.config import Settings
from tally.interface.api.routes import health, likes
from tally.util.di.container import create_container, setup_di
from tally.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Drain background durable sync before the container shuts down."""
    yield
    container: AsyncContainer = app.state.dishka_container
    dispatcher = await container.get(SyncDispatcher)
    if dispatcher.pending:
        logfire.info("Draining durable sync tasks", pending=dispatcher.pending)
    await dispatcher.drain()
    await container.close()


def create_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container by default
    """
    settings = Settings()

    app_instance = FastAPI(
        title="Tally API",
        description="Like counters backed by Redis with PostgreSQL as the durable copy",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Setup dependency injection
    setup_di(app_instance, container or create_container())

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(likes.router)

    return app_instance
