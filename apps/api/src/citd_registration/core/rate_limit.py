"""
Rate Limiting Module

Sliding-window rate limiting for public endpoints, backed by Redis sorted
sets. Falls back to process memory when Redis is unavailable, so a missing
Redis degrades to per-process limits instead of failing requests.

The limiter owns its Redis connection: it is created once in the
application lifespan and exposed to endpoints through ``app.state``.
"""

import logging
import time

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis, from_url

logger = logging.getLogger(__name__)


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


class RateLimiter:
    """Sliding-window limiter with a Redis backend and an in-memory fallback."""

    def __init__(self, redis_url: str | None = None):
        self.redis_url = redis_url
        self.redis: Redis | None = None
        # {key: [timestamp, ...]}
        self._memory_store: dict[str, list[float]] = {}

    async def connect(self) -> None:
        """Connect to Redis. Raises if Redis is unreachable."""
        if not self.redis_url:
            return
        client = from_url(self.redis_url, encoding="utf-8", decode_responses=True)
        try:
            await client.ping()
        except Exception:
            await client.aclose()
            raise
        self.redis = client

    async def close(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None

    @property
    def is_redis_available(self) -> bool:
        return self.redis is not None

    async def _check_redis(self, key: str, limit: int, window_seconds: int) -> bool:
        now = time.time()
        window_start = now - window_seconds

        pipe = self.redis.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        pipe.zadd(key, {str(now): now})
        pipe.expire(key, window_seconds)
        results = await pipe.execute()

        return results[1] < limit

    def _check_memory(self, key: str, limit: int, window_seconds: int) -> bool:
        now = time.time()
        window_start = now - window_seconds

        hits = [ts for ts in self._memory_store.get(key, []) if ts > window_start]
        if len(hits) >= limit:
            self._memory_store[key] = hits
            return False

        hits.append(now)
        self._memory_store[key] = hits
        return True

    async def check(self, key: str, limit: int, window_seconds: int) -> bool:
        """
        Check if a request is within rate limits.

        Args:
            key: Unique key for this rate limit (e.g., "rate_limit:1.2.3.4:/api/submit-form")
            limit: Maximum requests allowed in the window
            window_seconds: Time window in seconds

        Returns:
            True if request is allowed, False if rate limit exceeded
        """
        if self.redis is not None:
            try:
                return await self._check_redis(key, limit, window_seconds)
            except Exception as e:
                logger.warning(f"Redis rate limit check failed, using memory: {e}")

        return self._check_memory(key, limit, window_seconds)


def client_ip_key(request: Request) -> str:
    """Default rate limit key: client IP + endpoint path."""
    client_ip = request.client.host if request.client else "unknown"
    return f"rate_limit:{client_ip}:{request.url.path}"


async def enforce_rate_limit(
    request: Request,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Apply the application's rate limiter to a request.

    Skips silently when no limiter is configured on ``app.state``.

    Raises:
        RateLimitExceeded: When rate limit is exceeded (HTTP 429)
    """
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return

    key = client_ip_key(request)
    if not await limiter.check(key, limit, window_seconds):
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "RateLimiter",
    "RateLimitExceeded",
    "client_ip_key",
    "enforce_rate_limit",
]
