"""
Cache store exceptions

All cache-related errors inherit from CacheError base class.
"""


class CacheError(Exception):
    """
    Base exception for all cache store errors.

    Catch this to handle any cache store error generically.
    """

    pass


class CacheBackendError(CacheError):
    """
    Exception raised when a cache backend operation fails.

    This exception wraps backend-specific errors such as:
    - Connection errors or timeouts of the key-value server
    - Stored value which can't be decoded

    Args:
        message: Description of the backend error
        originalError: The original exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Exception | None = None):
        super().__init__(message)
        self.originalError = originalError


class LockWaitTimeoutError(CacheError):
    """
    Exception raised when value didn't appear while waiting for lock owner.

    Args:
        key: Cache key
        waited: Seconds spent waiting
    """

    def __init__(self, key: str, waited: float):
        super().__init__(f"Timeout waiting for cache fill of '{key}' after {waited:.3f}s")
        self.key = key
        self.waited = waited


class CacheConfigError(CacheError):
    """
    Exception raised when cache store configuration is invalid.

    This exception is raised when:
    - Store type is not recognized
    - Required backend parameters are missing
    - Configuration values are invalid
    """

    pass
