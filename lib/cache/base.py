"""
Base locking cache with shared encoding, statistics and wait loop, dood!
"""

import asyncio
import time
from abc import abstractmethod
from typing import Any, Dict, Optional

from lib.context import RequestCancelledError, RequestContext

from .errors import CacheBackendError, LockWaitTimeoutError
from .interface import LockingCacheInterface
from .types import CacheStoreConfig, V, ValueConverter


class BaseLockingCache(LockingCacheInterface[V]):
    """
    Locking cache on top of raw string storage, dood!

    Subclasses implement raw get/set of encoded values and lock primitives,
    this class converts values and implements polling waitForUnlock().
    """

    def __init__(self, converter: ValueConverter[V], config: Optional[CacheStoreConfig] = None):
        """
        Args:
            converter: Value converter used to store values as strings
            config: Store configuration (defaults if None)
        """
        self.converter = converter
        self.config = config if config is not None else CacheStoreConfig()
        self._stats: Dict[str, float] = {
            "hits": 0,
            "misses": 0,
            "locksAcquired": 0,
            "locksContended": 0,
            "lockWaits": 0,
            "lockWaitTimeouts": 0,
            "lockWaitSeconds": 0.0,
        }

    @abstractmethod
    async def _getRaw(self, key: str) -> Optional[str]:
        """Get encoded value by cache key, None if missing or expired"""
        pass

    @abstractmethod
    async def _setRaw(self, key: str, raw: str) -> None:
        """Store encoded value with cacheTTL"""
        pass

    def _decode(self, key: str, raw: str) -> V:
        try:
            return self.converter.decode(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise CacheBackendError(f"Failed to decode cached value of '{key}': {e!r}", e) from e

    async def get(self, ctx: RequestContext, key: str) -> Optional[V]:
        log = ctx.logger(__name__)
        raw = await self._getRaw(key)
        if raw is None:
            self._stats["misses"] += 1
            log.debug(f"Cache miss for key: {key}")
            return None

        self._stats["hits"] += 1
        log.debug(f"Cache hit for key: {key}")
        return self._decode(key, raw)

    async def set(self, ctx: RequestContext, key: str, value: V) -> None:
        try:
            raw = self.converter.encode(value)
        except (TypeError, ValueError) as e:
            raise CacheBackendError(f"Failed to encode value of '{key}': {e!r}", e) from e

        await self._setRaw(key, raw)
        ctx.logger(__name__).debug(f"Stored value for key: {key}")

    async def waitForUnlock(self, ctx: RequestContext, key: str) -> V:
        log = ctx.logger(__name__)
        self._stats["lockWaits"] += 1
        start = time.monotonic()
        log.debug(f"Waiting for cache fill of '{key}'")

        try:
            while True:
                remaining = ctx.remaining()
                if remaining is not None and remaining <= 0:
                    raise RequestCancelledError(ctx.traceId)

                elapsed = time.monotonic() - start
                if elapsed >= self.config.lockMaxWait:
                    self._stats["lockWaitTimeouts"] += 1
                    raise LockWaitTimeoutError(key, elapsed)

                delay = min(self.config.lockRetryInterval, self.config.lockMaxWait - elapsed)
                if remaining is not None:
                    delay = min(delay, remaining)
                await asyncio.sleep(delay)

                raw = await self._getRaw(key)
                if raw is None:
                    continue
                try:
                    value = self._decode(key, raw)
                except CacheBackendError as e:
                    log.warning(f"Skipping undecodable value while waiting: {e}")
                    continue

                log.debug(f"Got value of '{key}' after {time.monotonic() - start:.3f}s of waiting")
                return value
        finally:
            self._stats["lockWaitSeconds"] += time.monotonic() - start

    def getStats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = dict(self._stats)
        stats.update(
            {
                "enabled": True,
                "cacheTTL": self.config.cacheTTL,
                "lockTTL": self.config.lockTTL,
                "lockRetryInterval": self.config.lockRetryInterval,
                "lockMaxWait": self.config.lockMaxWait,
            }
        )
        return stats
