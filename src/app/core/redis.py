"""
Redis Configuration

Optional async Redis client. Used as the shared backend for rate limiting;
the API keeps working (with per-process limits) when Redis is down.
"""

import logging

from redis.asyncio import Redis, from_url

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection.

    Call this on application startup.
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    return redis_client


async def get_redis() -> Redis | None:
    """Get the Redis client, or None when Redis was not initialized."""
    return redis_client


async def ping_redis() -> bool:
    """Health probe."""
    if redis_client is None:
        return False
    try:
        return bool(await redis_client.ping())
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
