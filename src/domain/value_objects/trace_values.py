"""Request trace value objects.

Phase timing breakdown, query filters and aggregate statistics for
recorded request traces.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class PhaseTiming:
    """Per-phase latency breakdown of one request (milliseconds).

    Phases run in order: middleware, guard, interceptor_pre, handler,
    interceptor_post. Their sum approximates the total request duration.

    Raises:
        ValueError: If any phase is negative.
    """

    middleware: float = 0.0
    guard: float = 0.0
    interceptor_pre: float = 0.0
    handler: float = 0.0
    interceptor_post: float = 0.0

    def __post_init__(self) -> None:
        for name in (
            "middleware",
            "guard",
            "interceptor_pre",
            "handler",
            "interceptor_post",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    @property
    def total(self) -> float:
        """Sum of all phases."""
        return (
            self.middleware
            + self.guard
            + self.interceptor_pre
            + self.handler
            + self.interceptor_post
        )

    def to_dict(self) -> dict[str, float]:
        """Serialize with the camelCase keys used on the wire and in storage."""
        return {
            "middleware": self.middleware,
            "guard": self.guard,
            "interceptorPre": self.interceptor_pre,
            "handler": self.handler,
            "interceptorPost": self.interceptor_post,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PhaseTiming":
        """Build from a stored camelCase mapping; missing phases are 0."""
        data = data or {}
        return cls(
            middleware=float(data.get("middleware", 0.0)),
            guard=float(data.get("guard", 0.0)),
            interceptor_pre=float(data.get("interceptorPre", 0.0)),
            handler=float(data.get("handler", 0.0)),
            interceptor_post=float(data.get("interceptorPost", 0.0)),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class TraceInput:
    """Data captured by the request pipeline for one completed request.

    Attributes:
        trace_id: Request correlation id (X-Trace-Id).
        method: HTTP method.
        path: Request path without query string.
        status_code: Response status code.
        duration_ms: Total duration, rounded to 2 decimals by the caller.
        timing: Phase breakdown.
        user_agent: Client user agent ("unknown" when absent).
        ip: Client IP ("unknown" when absent).
        user_id: Authenticated user id, if any.
    """

    trace_id: UUID
    method: str
    path: str
    status_code: int
    duration_ms: float
    timing: PhaseTiming
    user_agent: str
    ip: str
    user_id: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TraceFilters:
    """Filters for listing recent traces. All filters are AND-combined.

    Attributes:
        method: Exact HTTP method.
        path: Substring of the request path.
        status_code: Exact status code.
        min_duration: Inclusive lower bound on duration_ms.
        max_duration: Inclusive upper bound on duration_ms.
        limit: Page size.
        offset: Rows to skip.

    Raises:
        ValueError: If limit is not positive or offset is negative.
    """

    method: str | None = None
    path: str | None = None
    status_code: int | None = None
    min_duration: float | None = None
    max_duration: float | None = None
    limit: int = 100
    offset: int = 0

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")


@dataclass(frozen=True, slots=True, kw_only=True)
class TraceStats:
    """Aggregate statistics over all retained traces.

    All fields are 0 when there are no traces.
    """

    total_count: int
    avg_duration: float
    error_rate: float

    @classmethod
    def empty(cls) -> "TraceStats":
        return cls(total_count=0, avg_duration=0.0, error_rate=0.0)


@dataclass(frozen=True, slots=True, kw_only=True)
class HourlyStats:
    """Statistics for one clock hour that saw at least one trace.

    Attributes:
        hour: Start of the hour (UTC).
        count: Traces in the hour.
        avg_duration: Mean duration_ms.
        error_rate: Percentage of traces with status >= 400.
        p95_duration: 95th percentile duration_ms.
    """

    hour: datetime
    count: int
    avg_duration: float
    error_rate: float
    p95_duration: float


@dataclass(frozen=True, slots=True, kw_only=True)
class EndpointStats:
    """Statistics grouped by (path, method)."""

    path: str
    method: str
    count: int
    avg_duration: float
    error_rate: float
