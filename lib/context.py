"""
Request context for weather resolver.

RequestContext is created once per inbound request and passed explicitly
through every call of the resolution pipeline. It carries the trace id,
an optional deadline and the request-bound logger.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from .logging_utils import TraceLoggerAdapter


def _newTraceId() -> str:
    return uuid.uuid4().hex[:16]


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request context.

    Attributes:
        traceId: Request trace id, attached to every log record
        deadline: Absolute deadline on `time.monotonic()` clock, None for no deadline
    """

    traceId: str = field(default_factory=_newTraceId)
    deadline: Optional[float] = None

    @classmethod
    def new(cls, timeout: Optional[float] = None, traceId: Optional[str] = None) -> "RequestContext":
        """
        Create new context.

        Args:
            timeout: Seconds from now until the request is considered cancelled
            traceId: Trace id to use (random one is generated if None)
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        return cls(traceId=traceId or _newTraceId(), deadline=deadline)

    def remaining(self) -> Optional[float]:
        """Seconds left until deadline (never negative), None if no deadline set"""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def isExpired(self) -> bool:
        """Check if deadline has passed"""
        return self.deadline is not None and time.monotonic() >= self.deadline

    def boundTimeout(self, timeout: float) -> float:
        """Limit given timeout by the time left until deadline"""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    def logger(self, name: str) -> TraceLoggerAdapter:
        """Get logger bound to this request"""
        return TraceLoggerAdapter(logging.getLogger(name), {"traceId": self.traceId})


class RequestCancelledError(Exception):
    """Raised when request deadline passed before operation could complete"""

    def __init__(self, traceId: str):
        super().__init__(f"Request {traceId} deadline exceeded")
        self.traceId = traceId
