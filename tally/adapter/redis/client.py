"""Redis client construction."""

import redis.asyncio as redis

from tally.config import RedisSettings
from tally.util.error import ConfigurationError

_SCHEMES = ("redis://", "rediss://", "unix://")


def create_redis(settings: RedisSettings) -> redis.Redis:
    """Create async Redis client.

    Responses are decoded to str so counters and set members come back in
    the same shape they were written in.

    Args:
        settings: Redis settings

    Returns:
        Configured client (connections are opened lazily)

    Raises:
        ConfigurationError: If the URL is not a Redis URL
    """
    if not settings.url.startswith(_SCHEMES):
        raise ConfigurationError(f"Unsupported Redis URL: {settings.url!r}")

    return redis.Redis.from_url(
        settings.url,
        decode_responses=True,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.socket_connect_timeout,
        health_check_interval=settings.health_check_interval,
    )
