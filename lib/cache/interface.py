"""
Abstract locking cache interface for lib.cache, dood!

This module defines the generic LockingCacheInterface that all cache store
implementations must follow: a key-value store with TTL plus a short-lived
exclusive lock per key, used to let only one request compute a missing value
while others wait for it, dood!
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from lib.context import RequestContext

from .types import V


class LockingCacheInterface(ABC, Generic[V]):
    """
    Generic cache-aside store with per-key locks, dood!

    Type Parameters:
        V: The value type

    Example:
        >>> cache = DictLockingCache[WeatherResult](DataclassValueConverter(WeatherResult))
        >>> value = await cache.get(ctx, "kyiv")
        >>> if value is None:
        ...     if await cache.acquireLock(ctx, "kyiv"):
        ...         try:
        ...             value = await computeValue()
        ...             await cache.set(ctx, "kyiv", value)
        ...         finally:
        ...             await cache.releaseLock(ctx, "kyiv")
        ...     else:
        ...         value = await cache.waitForUnlock(ctx, "kyiv")
    """

    @abstractmethod
    async def get(self, ctx: RequestContext, key: str) -> Optional[V]:
        """
        Get cached value by key, dood!

        Args:
            ctx: Request context
            key: The cache key to retrieve

        Returns:
            Optional[V]: The cached value if found and not expired, None on miss

        Raises:
            CacheBackendError: If backend failed or stored value can't be decoded
        """
        pass

    @abstractmethod
    async def set(self, ctx: RequestContext, key: str, value: V) -> None:
        """
        Store value in cache with store-wide TTL, dood!

        Value is written atomically, readers never see partial value.

        Raises:
            CacheBackendError: If backend failed or value can't be encoded
        """
        pass

    @abstractmethod
    async def acquireLock(self, ctx: RequestContext, key: str) -> bool:
        """
        Try to acquire lock for key without blocking, dood!

        Lock is an atomic set-if-absent marker with its own TTL, so it
        expires by itself if the owner never releases it.

        Returns:
            bool: True if lock was acquired by this call, False if somebody holds it

        Raises:
            CacheBackendError: If backend failed
        """
        pass

    @abstractmethod
    async def waitForUnlock(self, ctx: RequestContext, key: str) -> V:
        """
        Wait for value of key to appear in cache, dood!

        Polls the store at fixed interval (sleeping between polls) until
        value appears, maximum wait time elapses or request deadline passes.

        Returns:
            V: The value written by lock owner

        Raises:
            LockWaitTimeoutError: If value didn't appear in time
            RequestCancelledError: If request deadline passed
            CacheBackendError: If backend failed
        """
        pass

    @abstractmethod
    async def releaseLock(self, ctx: RequestContext, key: str) -> None:
        """
        Release lock for key. Releasing not held lock is not an error, dood!

        Raises:
            CacheBackendError: If backend failed
        """
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics, dood!

        Returns:
            Dict[str, Any]: Implementation-specific statistics
        """
        pass

    async def close(self) -> None:
        """Release backend resources (connections, etc.), dood!"""
        pass
