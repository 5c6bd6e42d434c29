"""
Rate Limiting Module

Sliding-window rate limiting backed by Redis sorted sets, falling back to
in-memory storage when Redis is unavailable.

Two entry points:
- RateLimitMiddleware: global per-IP quota on every /api/ request
- rate_limit(): per-route dependency for sensitive endpoints (login,
  registration, password reset)
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.config import settings
from app.core.error_handlers import build_error_response
from app.core.errors import RateLimitExceeded
from app.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis.

    Uses a sliding window algorithm with Redis sorted sets.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using in-memory storage.

    Fallback when Redis is unavailable. Does not work across multiple
    server instances.
    """
    now = time.time()
    window_start = now - window_seconds

    timestamps = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(timestamps) >= limit:
        _memory_store[key] = timestamps
        return False

    timestamps.append(now)
    _memory_store[key] = timestamps
    return True


def reset_memory_store() -> None:
    """Clear in-memory counters."""
    _memory_store.clear()


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit (e.g., "rate_limit:auth:1.2.3.4")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = await get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(
    limit: int | None = None,
    window_seconds: int | None = None,
    scope: str = "auth",
) -> Callable:
    """
    Build a per-route rate limiting dependency.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limit(scope="login"))])

    Raises:
        RateLimitExceeded: When the quota is exhausted (HTTP 429)
    """
    max_requests = limit or settings.auth_rate_limit_requests
    window = window_seconds or settings.auth_rate_limit_window_seconds

    async def dependency(request: Request) -> None:
        key = f"rate_limit:{scope}:{client_ip(request)}"
        if not await check_rate_limit(key, max_requests, window):
            logger.warning(f"Rate limit exceeded for {key}: {max_requests}/{window}s")
            raise RateLimitExceeded(max_requests, window)

    return dependency


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Global per-IP quota for API routes."""

    def __init__(self, app, limit: int | None = None, window_seconds: int | None = None, prefix: str = "/api/"):
        super().__init__(app)
        self.limit = limit or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window_seconds
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.prefix) or request.url.path == "/api/health":
            return await call_next(request)

        key = f"rate_limit:global:{client_ip(request)}"
        if not await check_rate_limit(key, self.limit, self.window_seconds):
            logger.warning(f"Global rate limit exceeded for {key}")
            exc = RateLimitExceeded(self.limit, self.window_seconds)
            return build_error_response(
                request, exc.status_code, exc.error_code, exc.message, exc.details, exc.headers
            )
        return await call_next(request)


__all__ = [
    "RateLimitExceeded",
    "RateLimitMiddleware",
    "check_rate_limit",
    "client_ip",
    "rate_limit",
    "reset_memory_store",
]
