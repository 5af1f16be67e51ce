"""
Locking cache factory, dood!

Builds store instance from `[cache]` section of configuration.
"""

import logging
from typing import Any, Dict

import lib.utils as utils

from .dict_cache import DictLockingCache
from .errors import CacheConfigError
from .interface import LockingCacheInterface
from .null_cache import NullLockingCache
from .redis_cache import RedisLockingCache
from .types import CacheStoreConfig, V, ValueConverter

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def createLockingCache(config: Dict[str, Any], converter: ValueConverter[V]) -> LockingCacheInterface[V]:
    """
    Create locking cache from configuration, dood!

    Args:
        config: `[cache]` configuration section. Key `type` selects the store:
            `redis` (default), `memory` or `null`. Redis connection settings are
            read from nested `redis` table (`url`, `password`, `socket-timeout`).
        converter: Value converter for stored values

    Returns:
        LockingCacheInterface[V]: Configured store

    Raises:
        CacheConfigError: If configuration is invalid
    """
    try:
        storeConfig = CacheStoreConfig.fromDict(config)
    except ValueError as e:
        raise CacheConfigError(f"Invalid cache configuration: {e}") from e

    storeType = str(config.get("type", "redis")).lower()
    match storeType:
        case "redis":
            redisConfig: Dict[str, Any] = config.get("redis", {})
            url = redisConfig.get("url", DEFAULT_REDIS_URL)
            socketTimeout = None
            if "socket-timeout" in redisConfig:
                try:
                    socketTimeout = utils.parseDuration(redisConfig["socket-timeout"])
                except ValueError as e:
                    raise CacheConfigError(f"Invalid redis socket-timeout: {e}") from e
            store: LockingCacheInterface[V] = RedisLockingCache.fromUrl(
                url,
                converter,
                storeConfig,
                password=redisConfig.get("password"),
                socketTimeout=socketTimeout,
            )
        case "memory" | "dict":
            store = DictLockingCache(converter, storeConfig)
        case "null" | "none":
            store = NullLockingCache()
        case _:
            raise CacheConfigError(f"Unknown cache type '{storeType}'")

    logger.info(f"Created {type(store).__name__} (cacheTTL={storeConfig.cacheTTL}s, lockTTL={storeConfig.lockTTL}s)")
    return store
