"""Health check routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from tally.config import Settings
from tally.domain.service import CounterService


router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str


class CounterHealthResponse(BaseModel):
    """Atomic store reachability."""

    status: str
    redis: bool
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status indicating the service is running
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        version="0.1.0",
        git_sha=settings.git_sha,
    )


@router.get("/health/counters", response_model=CounterHealthResponse)
async def counter_health(
    counter_service: FromDishka[CounterService], response: Response
) -> CounterHealthResponse:
    """Check the Redis counter store is reachable.

    Responds 503 when it is not; reads still work from PostgreSQL but
    toggles fail.
    """
    reachable = await counter_service.store_health()
    if not reachable:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return CounterHealthResponse(
        status="healthy" if reachable else "degraded",
        redis=reachable,
        timestamp=datetime.now(),
    )
