"""
Null locking cache implementation for lib.cache, dood!

This module provides a no-op store that implements the LockingCacheInterface
but doesn't actually cache or lock anything. Every request becomes lock
owner and goes upstream, dood!
"""

from typing import Any, Dict, Optional

from lib.context import RequestContext

from .errors import LockWaitTimeoutError
from .interface import LockingCacheInterface
from .types import V


class NullLockingCache(LockingCacheInterface[V]):
    """No-op cache that never stores anything, dood!

    Useful for:
    - Testing without cache side effects
    - Disabling cache in production
    - Benchmarking cache impact
    """

    async def get(self, ctx: RequestContext, key: str) -> Optional[V]:
        """Always return None (cache miss), dood!"""
        return None

    async def set(self, ctx: RequestContext, key: str, value: V) -> None:
        """Do nothing (don't cache), dood!"""
        pass

    async def acquireLock(self, ctx: RequestContext, key: str) -> bool:
        """Always succeed, so nobody ever waits for a value which never comes"""
        return True

    async def waitForUnlock(self, ctx: RequestContext, key: str) -> V:
        raise LockWaitTimeoutError(key, 0.0)

    async def releaseLock(self, ctx: RequestContext, key: str) -> None:
        pass

    def getStats(self) -> Dict[str, Any]:
        """
        Return cache statistics indicating cache is disabled, dood!

        Returns:
            Dict[str, Any]: Dictionary with cache disabled indicator
        """
        return {"enabled": False}
