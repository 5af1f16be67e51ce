"""
Weather resolution errors

AppError and its subclasses are the only errors callers of the resolution
service ever see. Each carries HTTP-style code and message for direct
mapping by an HTTP layer.

UpstreamUnavailableError is internal to the provider chain: it means
"try next provider" and never leaves the chain.
"""

from typing import Any, Dict


class AppError(Exception):
    """
    Base exception for caller-visible errors.

    Args:
        code: HTTP-style status code
        message: Message safe to show to end user
    """

    code: int = 500
    defaultMessage: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.defaultMessage
        super().__init__(self.message)

    def toDict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class CityNotFoundError(AppError):
    """City is unknown to the provider. Terminal, never retried across the chain."""

    code = 404
    defaultMessage = "City not found"


class InvalidRequestError(AppError):
    """Caller error, e.g. empty city."""

    code = 400
    defaultMessage = "Invalid request"


class InternalServerError(AppError):
    """Chain exhaustion, lock wait timeout, cancelled request, unexpected failure."""

    code = 500
    defaultMessage = "Internal server error"


class UpstreamUnavailableError(Exception):
    """
    Provider failed for transient reason (transport error, bad status, undecodable body).

    Args:
        providerName: Name of failed provider
        reason: Failure description (logged, never shown to callers)
    """

    def __init__(self, providerName: str, reason: str, originalError: Exception | None = None):
        super().__init__(f"{providerName}: {reason}")
        self.providerName = providerName
        self.reason = reason
        self.originalError = originalError


class ProviderChainConfigError(ValueError):
    """Provider chain can't be built from given configuration."""

    pass
