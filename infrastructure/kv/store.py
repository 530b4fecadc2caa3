"""Redis implementation of KeyValueStore.

Values are stored as strings; JSON helpers serialise with ``json`` so entries
stay readable from redis-cli. Redis failures surface as
StoreUnavailableError (503) - unlike a cache, nothing here can be skipped.
"""

import json
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from errors import StoreUnavailableError
from shared.logging import get_logger

log = get_logger(__name__)


class RedisKeyValueStore:
    def __init__(self, redis_client: aioredis.Redis) -> None:
        self._redis = redis_client

    def _unavailable(self, op: str, key: str, e: RedisError) -> StoreUnavailableError:
        log.error(
            "kv_store_error",
            op=op,
            kv_prefix=key.split(":", 1)[0],
            error=str(e),
            error_type=type(e).__name__,
        )
        return StoreUnavailableError("Storage temporarily unavailable")

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise self._unavailable("get", key, e) from e

    async def put(
        self, key: str, value: str, ttl_seconds: Optional[int] = None
    ) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise self._unavailable("put", key, e) from e

    async def get_json(self, key: str) -> Optional[Any]:
        raw = await self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def put_json(
        self, key: str, value: Any, ttl_seconds: Optional[int] = None
    ) -> None:
        await self.put(key, json.dumps(value), ttl_seconds)

    async def incr(self, key: str, ttl_seconds: Optional[int] = None) -> int:
        """Atomically increment *key*; the TTL is applied only when the key is new."""
        try:
            value = int(await self._redis.incr(key))
            if value == 1 and ttl_seconds:
                await self._redis.expire(key, ttl_seconds)
            return value
        except RedisError as e:
            raise self._unavailable("incr", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise self._unavailable("delete", key, e) from e
