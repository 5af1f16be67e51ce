"""
Tests for NullLockingCache implementation, dood!
"""

from typing import Any

import pytest

from lib.context import RequestContext

from .errors import LockWaitTimeoutError
from .null_cache import NullLockingCache


class TestNullLockingCache:
    """Test cases for NullLockingCache class, dood!"""

    def setup_method(self):
        """Set up test fixtures before each test method, dood!"""
        self.cache = NullLockingCache[Any]()
        self.ctx = RequestContext.new()

    @pytest.mark.asyncio
    async def test_get_after_set_returns_none(self):
        """Test that nothing is ever stored, dood!"""
        await self.cache.set(self.ctx, "london", {"temperature": 1})

        assert await self.cache.get(self.ctx, "london") is None

    @pytest.mark.asyncio
    async def test_lock_always_acquired(self):
        """Test every request becomes lock owner, dood!"""
        assert await self.cache.acquireLock(self.ctx, "london") is True
        assert await self.cache.acquireLock(RequestContext.new(), "london") is True

        await self.cache.releaseLock(self.ctx, "london")

    @pytest.mark.asyncio
    async def test_wait_fails_immediately(self):
        with pytest.raises(LockWaitTimeoutError):
            await self.cache.waitForUnlock(self.ctx, "london")

    def test_stats_show_disabled(self):
        assert self.cache.getStats() == {"enabled": False}
