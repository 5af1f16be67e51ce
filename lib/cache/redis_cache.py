"""
Redis-backed locking cache implementation, dood!

Values are stored with `SET key value PX ttl`, locks are taken with
`SET lock owner NX PX ttl` and released with `DEL`.
"""

import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from lib.context import RequestContext

from .base import BaseLockingCache
from .errors import CacheBackendError
from .types import CacheStoreConfig, V, ValueConverter

logger = logging.getLogger(__name__)


class RedisLockingCache(BaseLockingCache[V]):
    """
    Locking cache stored in Redis, shared by all service instances, dood!

    All Redis errors are wrapped into CacheBackendError.

    Example:
        >>> cache = RedisLockingCache.fromUrl(
        ...     "redis://localhost:6379/0",
        ...     converter=DataclassValueConverter(WeatherResult),
        ...     config=CacheStoreConfig(cacheTTL=300),
        ... )
    """

    def __init__(
        self,
        client: aioredis.Redis,
        converter: ValueConverter[V],
        config: Optional[CacheStoreConfig] = None,
    ):
        """
        Args:
            client: redis.asyncio client
            converter: Value converter used to store values as strings
            config: Store configuration (defaults if None)
        """
        super().__init__(converter, config)
        self.client = client

    @classmethod
    def fromUrl(
        cls,
        url: str,
        converter: ValueConverter[V],
        config: Optional[CacheStoreConfig] = None,
        password: Optional[str] = None,
        socketTimeout: Optional[float] = None,
    ) -> "RedisLockingCache[V]":
        """Create store with new Redis client for given URL, dood!"""
        client = aioredis.from_url(
            url,
            password=password or None,
            socket_timeout=socketTimeout,
            socket_connect_timeout=socketTimeout,
            decode_responses=True,
        )
        return cls(client, converter, config)

    @staticmethod
    def _toStr(raw: Any) -> Optional[str]:
        if raw is None:
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return str(raw)

    async def _getRaw(self, key: str) -> Optional[str]:
        storeKey = self.config.valueKey(key)
        try:
            raw = await self.client.get(storeKey)
        except RedisError as e:
            raise CacheBackendError(f"Redis GET {storeKey} failed: {e}", e) from e
        try:
            return self._toStr(raw)
        except UnicodeDecodeError as e:
            raise CacheBackendError(f"Redis value of {storeKey} is not valid UTF-8", e) from e

    async def _setRaw(self, key: str, raw: str) -> None:
        storeKey = self.config.valueKey(key)
        try:
            await self.client.set(storeKey, raw, px=int(self.config.cacheTTL * 1000))
        except RedisError as e:
            raise CacheBackendError(f"Redis SET {storeKey} failed: {e}", e) from e

    async def acquireLock(self, ctx: RequestContext, key: str) -> bool:
        lockKey = self.config.lockKey(key)
        try:
            acquired = await self.client.set(lockKey, ctx.traceId, nx=True, px=int(self.config.lockTTL * 1000))
        except RedisError as e:
            raise CacheBackendError(f"Redis SET NX {lockKey} failed: {e}", e) from e

        if acquired:
            self._stats["locksAcquired"] += 1
            ctx.logger(__name__).debug(f"Acquired lock {lockKey}")
            return True

        self._stats["locksContended"] += 1
        return False

    async def releaseLock(self, ctx: RequestContext, key: str) -> None:
        lockKey = self.config.lockKey(key)
        try:
            await self.client.delete(lockKey)
        except RedisError as e:
            raise CacheBackendError(f"Redis DEL {lockKey} failed: {e}", e) from e
        ctx.logger(__name__).debug(f"Released lock {lockKey}")

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Redis connection closed, dood!")

    def getStats(self) -> Dict[str, Any]:
        stats = super().getStats()
        stats["backend"] = "redis"
        return stats
