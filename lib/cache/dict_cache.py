"""
Simple dictionary-based locking cache implementation, dood!

This module provides in-memory store with the same TTL and lock semantics as
the Redis one. Useful for single-process deployments and testing.
"""

import logging
import time
from threading import RLock
from typing import Any, Dict, Optional, Tuple

from lib.context import RequestContext

from .base import BaseLockingCache
from .types import CacheStoreConfig, V, ValueConverter

logger = logging.getLogger(__name__)


class DictLockingCache(BaseLockingCache[V]):
    """
    In-process locking cache, dood!

    Values are stored encoded, exactly as a remote store would keep them.
    Expired values and locks are dropped lazily on access.

    Thread Safety:
        All operations on internal dictionaries are guarded by RLock,
        no operation awaits while holding it.
    """

    def __init__(self, converter: ValueConverter[V], config: Optional[CacheStoreConfig] = None):
        super().__init__(converter, config)
        # key -> (encoded value, expiration time on monotonic clock)
        self._values: Dict[str, Tuple[str, float]] = {}
        # key -> lock expiration time on monotonic clock
        self._locks: Dict[str, float] = {}
        self._lock = RLock()

    def _cleanupExpired(self) -> None:
        """Remove expired values and locks"""
        now = time.monotonic()
        with self._lock:
            expiredValues = [key for key, (_, expiresAt) in self._values.items() if expiresAt <= now]
            for key in expiredValues:
                del self._values[key]
            expiredLocks = [key for key, expiresAt in self._locks.items() if expiresAt <= now]
            for key in expiredLocks:
                del self._locks[key]

        if expiredValues or expiredLocks:
            logger.debug(f"Cleaned up {len(expiredValues)} expired values and {len(expiredLocks)} expired locks")

    async def _getRaw(self, key: str) -> Optional[str]:
        storeKey = self.config.valueKey(key)
        with self._lock:
            entry = self._values.get(storeKey)
            if entry is None:
                return None
            raw, expiresAt = entry
            if expiresAt <= time.monotonic():
                del self._values[storeKey]
                return None
            return raw

    async def _setRaw(self, key: str, raw: str) -> None:
        self._cleanupExpired()
        with self._lock:
            self._values[self.config.valueKey(key)] = (raw, time.monotonic() + self.config.cacheTTL)

    async def acquireLock(self, ctx: RequestContext, key: str) -> bool:
        lockKey = self.config.lockKey(key)
        now = time.monotonic()
        with self._lock:
            expiresAt = self._locks.get(lockKey)
            if expiresAt is not None and expiresAt > now:
                self._stats["locksContended"] += 1
                return False
            self._locks[lockKey] = now + self.config.lockTTL
            self._stats["locksAcquired"] += 1

        ctx.logger(__name__).debug(f"Acquired lock {lockKey}")
        return True

    async def releaseLock(self, ctx: RequestContext, key: str) -> None:
        lockKey = self.config.lockKey(key)
        with self._lock:
            released = self._locks.pop(lockKey, None) is not None
        if released:
            ctx.logger(__name__).debug(f"Released lock {lockKey}")

    def clear(self) -> None:
        """Clear all cached data and locks"""
        with self._lock:
            self._values.clear()
            self._locks.clear()
        logger.debug("Cleared all cache data, dood!")

    def getStats(self) -> Dict[str, Any]:
        self._cleanupExpired()
        stats = super().getStats()
        with self._lock:
            stats["entries"] = len(self._values)
            stats["locks"] = len(self._locks)
        return stats
