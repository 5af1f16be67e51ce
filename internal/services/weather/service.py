"""
Weather service: cache-aside resolution of current weather with request coalescing

This module ties the provider chain and the locking cache together. Only one
request per city goes upstream at a time, concurrent requests for the same
city wait for its result to appear in cache.
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from lib.cache import (
    CacheBackendError,
    DataclassValueConverter,
    LockingCacheInterface,
    LockWaitTimeoutError,
    createLockingCache,
)
from lib.context import RequestCancelledError, RequestContext
from lib.weather.errors import AppError, InternalServerError, InvalidRequestError
from lib.weather.models import WeatherResult
from lib.weather.providers import ProviderChain, createProviderChain

if TYPE_CHECKING:
    from internal.config.manager import ConfigManager

logger = logging.getLogger(__name__)


class WeatherService:
    """
    Resolves current weather for a city.

    Resolution flow:
        1. Check cache, return cached value on hit
        2. On miss, try to acquire per-city lock
        3. Lock owner calls provider chain, stores result and releases lock
        4. Others wait until owner's result appears in cache

    Cache failures never fail a request: if cache can't be read, the request
    goes straight to the provider chain without touching cache or lock.

    Only AppError subclasses ever leave resolve().

    Usage:
        service = WeatherService.fromConfig(configManager)
        result = await service.resolve(RequestContext.new(timeout=10), "London")
        await service.close()
    """

    def __init__(self, cache: LockingCacheInterface[WeatherResult], chain: ProviderChain):
        """
        Args:
            cache: Locking cache shared by all requests
            chain: Provider chain used on cache miss
        """
        self.cache = cache
        self.chain = chain
        self._stats: Dict[str, float] = {
            "requests": 0,
            "cacheHits": 0,
            "cacheMisses": 0,
            "cacheErrors": 0,
            "lockErrors": 0,
            "lockWaits": 0,
            "lockWaitSeconds": 0.0,
            "upstreamCalls": 0,
            "degradedRequests": 0,
        }

    @classmethod
    def fromConfig(
        cls, configManager: "ConfigManager", transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "WeatherService":
        """
        Build service from configuration.

        Args:
            configManager: Loaded configuration
            transport: Optional httpx transport for all providers (used in tests)

        Raises:
            ProviderChainConfigError: If providers are misconfigured
            CacheConfigError: If cache is misconfigured
        """
        chain = createProviderChain(configManager.getProvidersConfig(), transport)
        cache = createLockingCache(configManager.getCacheConfig(), DataclassValueConverter(WeatherResult))
        return cls(cache, chain)

    @staticmethod
    def normalizeCity(city: str) -> str:
        """
        Get cache key for city: surrounding whitespace stripped, case folded.

        Raises:
            InvalidRequestError: If city is empty
        """
        if not isinstance(city, str) or not city.strip():
            raise InvalidRequestError("City must not be empty")
        return city.strip().casefold()

    async def resolve(self, ctx: RequestContext, city: str) -> WeatherResult:
        """
        Get current weather for city.

        Args:
            ctx: Request context
            city: City name

        Returns:
            WeatherResult: Current weather

        Raises:
            InvalidRequestError: If city is empty
            CityNotFoundError: If upstream doesn't know the city
            InternalServerError: On any other failure
        """
        self._stats["requests"] += 1
        key = self.normalizeCity(city)
        log = ctx.logger(__name__)

        try:
            return await self._resolve(ctx, city.strip(), key)
        except AppError:
            raise
        except RequestCancelledError as e:
            log.warning(f"Request for '{city}' cancelled: {e}")
            raise InternalServerError() from e
        except Exception as e:
            log.exception(f"Unexpected error while resolving '{city}'")
            raise InternalServerError() from e

    async def _resolve(self, ctx: RequestContext, city: str, key: str) -> WeatherResult:
        log = ctx.logger(__name__)

        try:
            cached = await self.cache.get(ctx, key)
        except CacheBackendError as e:
            self._stats["cacheErrors"] += 1
            self._stats["degradedRequests"] += 1
            log.warning(f"Cache read failed, resolving '{city}' without cache: {e}")
            return await self._fetchUpstream(ctx, city)

        if cached is not None:
            self._stats["cacheHits"] += 1
            return cached
        self._stats["cacheMisses"] += 1

        try:
            acquired = await self.cache.acquireLock(ctx, key)
        except CacheBackendError as e:
            # Lock state is unknown, so we never release it
            self._stats["lockErrors"] += 1
            log.warning(f"Failed to acquire lock for '{key}', resolving without lock: {e}")
            result = await self._fetchUpstream(ctx, city)
            await self._populate(ctx, key, result)
            return result

        if not acquired:
            return await self._waitForOwner(ctx, key)

        try:
            result = await self._fetchUpstream(ctx, city)
            await self._populate(ctx, key, result)
            return result
        finally:
            await self._release(ctx, key)

    async def _fetchUpstream(self, ctx: RequestContext, city: str) -> WeatherResult:
        self._stats["upstreamCalls"] += 1
        return await self.chain.getWeather(ctx, city)

    async def _populate(self, ctx: RequestContext, key: str, result: WeatherResult) -> None:
        try:
            await self.cache.set(ctx, key, result)
        except CacheBackendError as e:
            self._stats["cacheErrors"] += 1
            ctx.logger(__name__).warning(f"Failed to cache weather for '{key}': {e}")

    async def _release(self, ctx: RequestContext, key: str) -> None:
        try:
            await self.cache.releaseLock(ctx, key)
        except CacheBackendError as e:
            # Lock will expire by its TTL
            ctx.logger(__name__).warning(f"Failed to release lock for '{key}': {e}")

    async def _waitForOwner(self, ctx: RequestContext, key: str) -> WeatherResult:
        log = ctx.logger(__name__)
        self._stats["lockWaits"] += 1
        start = time.monotonic()
        try:
            return await self.cache.waitForUnlock(ctx, key)
        except LockWaitTimeoutError as e:
            log.warning(f"Gave up waiting for '{key}': {e}")
            raise InternalServerError() from e
        except CacheBackendError as e:
            log.error(f"Cache failed while waiting for '{key}': {e}")
            raise InternalServerError() from e
        finally:
            self._stats["lockWaitSeconds"] += time.monotonic() - start

    def getStats(self) -> Dict[str, Any]:
        """
        Get resolution statistics.

        Returns:
            Dict[str, Any]: Service counters plus cache statistics and provider order
        """
        stats: Dict[str, Any] = dict(self._stats)
        stats["cache"] = self.cache.getStats()
        stats["providers"] = self.chain.listNames()
        return stats

    async def close(self) -> None:
        """Release cache resources"""
        await self.cache.close()
        logger.info("WeatherService closed")
