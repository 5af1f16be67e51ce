"""
Core type definitions and protocols for lib.cache, dood!

This module contains the value converter protocol and the store
configuration shared by all locking cache implementations, dood!
"""

from dataclasses import dataclass
from typing import Any, Dict, Protocol, TypeVar

import lib.utils as utils

# Type variable for cached values, dood!
V = TypeVar("V")  # Value type - can be any type


class ValueConverter(Protocol[V]):
    """
    Protocol for converting objects to cache and back

    Type Parameters:
        V: The type of objects that can be converted to cache values

    """

    def encode(self, obj: V) -> str:
        """
        Convert object to cache value, dood!

        Args:
            obj: The object to convert to a cache value

        Returns:
            str: A string representation suitable for use as a cache value
        """
        ...

    def decode(self, value: str) -> V:
        """
        Decode cache value to object, dood!

        Args:
            value: The cache value to decode

        Returns:
            V: The decoded object

        Raises:
            ValueError, TypeError, KeyError: If value can't be decoded
        """
        ...


@dataclass
class CacheStoreConfig:
    """
    Configuration of locking cache store.

    All durations are in seconds.

    Attributes:
        cacheTTL: Lifetime of cached value
        lockTTL: Lifetime of lock marker (lock self-expires if owner crashes)
        lockRetryInterval: Interval between polls while waiting for value
        lockMaxWait: Maximum time to wait for value to appear
        valuePrefix: Key prefix for cached values
        lockPrefix: Key prefix for lock markers
    """

    cacheTTL: float = 300.0
    lockTTL: float = 3.0
    lockRetryInterval: float = 0.1
    lockMaxWait: float = 3.0
    valuePrefix: str = "weather:city"
    lockPrefix: str = "weather:lock"

    def __post_init__(self):
        """Validate configuration values"""
        if self.cacheTTL <= 0:
            raise ValueError("cacheTTL must be positive")
        if self.lockTTL <= 0:
            raise ValueError("lockTTL must be positive")
        if self.lockRetryInterval <= 0:
            raise ValueError("lockRetryInterval must be positive")
        if self.lockMaxWait <= 0:
            raise ValueError("lockMaxWait must be positive")

    @classmethod
    def fromDict(cls, config: Dict[str, Any]) -> "CacheStoreConfig":
        """
        Build config from `[cache]` section of configuration file, dood!

        Durations may be numbers (seconds) or strings like "5m", "100ms".

        Raises:
            ValueError: If some value is invalid
        """
        kwargs: Dict[str, Any] = {}
        for configKey, fieldName in (
            ("cache-ttl", "cacheTTL"),
            ("lock-ttl", "lockTTL"),
            ("lock-retry-interval", "lockRetryInterval"),
            ("lock-max-wait", "lockMaxWait"),
        ):
            if configKey in config:
                kwargs[fieldName] = utils.parseDuration(config[configKey])

        if "value-prefix" in config:
            kwargs["valuePrefix"] = str(config["value-prefix"])
        if "lock-prefix" in config:
            kwargs["lockPrefix"] = str(config["lock-prefix"])

        return cls(**kwargs)

    def valueKey(self, key: str) -> str:
        return f"{self.valuePrefix}:{key}"

    def lockKey(self, key: str) -> str:
        return f"{self.lockPrefix}:{key}"
