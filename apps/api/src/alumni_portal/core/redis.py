"""
Redis Client

Optional async Redis connection shared by the rate limiter. The API keeps
working without Redis; callers check ``get_redis()`` for None.
"""

import logging

from redis.asyncio import Redis, from_url

from alumni_portal.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Connect to Redis on application startup and verify with PING."""
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    logger.info("Redis client initialised")
    return redis_client


def get_redis() -> Redis | None:
    """Return the shared client, or None when Redis was not initialised."""
    return redis_client


async def close_redis() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
