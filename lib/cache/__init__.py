"""
lib.cache - Cache-aside store with per-key locks, dood!

This library provides a generic locking cache: key-value storage with TTL
plus short-lived exclusive lock per key, so that only one request computes
missing value while others wait for it to appear, dood!

Core Components:
- LockingCacheInterface: Abstract base class for all store implementations
- RedisLockingCache: Store shared by all processes, backed by Redis
- DictLockingCache: In-process store with the same semantics
- NullLockingCache: No-op store, every request is lock owner
- createLockingCache: Build store from configuration

Example Usage:
    >>> from lib.cache import DictLockingCache, DataclassValueConverter
    >>>
    >>> cache = DictLockingCache(DataclassValueConverter(WeatherResult))
    >>> await cache.set(ctx, "london", WeatherResult(18.0, 70, "Cloudy"))
    >>> result = await cache.get(ctx, "london")
"""

from .base import BaseLockingCache
from .dict_cache import DictLockingCache
from .errors import CacheBackendError, CacheConfigError, CacheError, LockWaitTimeoutError
from .factory import createLockingCache
from .interface import LockingCacheInterface
from .null_cache import NullLockingCache
from .redis_cache import RedisLockingCache
from .types import CacheStoreConfig, V, ValueConverter
from .value_converter import DataclassValueConverter

__all__ = [
    # Core types
    "ValueConverter",
    "CacheStoreConfig",
    "V",
    # Interfaces
    "LockingCacheInterface",
    "BaseLockingCache",
    # Implementations
    "RedisLockingCache",
    "DictLockingCache",
    "NullLockingCache",
    "createLockingCache",
    # Value Converters
    "DataclassValueConverter",
    # Errors
    "CacheError",
    "CacheBackendError",
    "CacheConfigError",
    "LockWaitTimeoutError",
]
