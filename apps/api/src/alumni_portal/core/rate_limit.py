"""
Rate Limiting

Sliding-window rate limits keyed per principal and action. Uses the shared
Redis client when it is connected and falls back to process memory otherwise.

Applied to:
- Profile approve/reject (prevents mass decisions)
- Job applications and message sends (prevents spam)
"""

import logging
import time
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from alumni_portal.core.config import settings
from alumni_portal.core.redis import get_redis

logger = logging.getLogger(__name__)

# (limit, window_seconds)
RATE_LIMIT_PROFILE_DECISION = (10, 60)
RATE_LIMIT_JOB_APPLY = (20, 60)
RATE_LIMIT_MESSAGE_SEND = (30, 60)

# {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """Raised when a caller exceeds the limit for an action (HTTP 429)."""

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


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """Sliding window over a Redis sorted set; returns True when allowed."""
    now = time.time()

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()

    return results[1] < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """In-process fallback. Not shared between workers."""
    now = time.time()
    window_start = now - window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check whether a request identified by ``key`` is within limits.

    Args:
        key: Unique key (e.g., "profile:approve:<user_id>")
        limit: Maximum requests allowed in the window
        window_seconds: Window length in seconds

    Returns:
        True if the request is allowed
    """
    if not settings.rate_limit_enabled:
        return True

    client = get_redis()
    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_rate_limit(
    principal_id: UUID,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Raise RateLimitExceeded when ``principal_id`` has used up ``action``.

    Raises:
        RateLimitExceeded: If the limit is exceeded
    """
    key = f"rate_limit:{action}:{principal_id}"
    if not await check_rate_limit(key, limit, window_seconds):
        logger.warning(
            f"Rate limit exceeded for {principal_id} on action '{action}': "
            f"{limit}/{window_seconds}s"
        )
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "RATE_LIMIT_JOB_APPLY",
    "RATE_LIMIT_MESSAGE_SEND",
    "RATE_LIMIT_PROFILE_DECISION",
    "RateLimitExceeded",
    "check_rate_limit",
    "enforce_rate_limit",
]
