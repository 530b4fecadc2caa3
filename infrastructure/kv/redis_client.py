"""Async Redis connection factory.

Redis is the gateway's only persistence layer, so a failed startup ping is
logged but not fatal: the client is still returned, store calls raise
StoreUnavailableError until Redis comes back, and /health reports unhealthy.
"""

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from shared.logging import get_logger

log = get_logger(__name__)


async def create_redis_client(redis_uri: str) -> aioredis.Redis:
    """Build a client for *redis_uri* and ping it once."""
    client: aioredis.Redis = aioredis.from_url(redis_uri, decode_responses=True)
    try:
        await client.ping()
        log.info("redis_connected", uri=redis_uri.split("@")[-1])  # mask credentials
    except RedisError as e:
        log.warning(
            "redis_connection_failed", error=str(e), error_type=type(e).__name__
        )
    return client
