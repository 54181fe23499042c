"""Request trace entity.

Pure business data, no framework dependencies. One immutable record per
completed HTTP request; created once, never updated, deleted in bulk by TTL
cleanup.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.value_objects.trace_values import PhaseTiming


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestTrace:
    """Recorded request with phase-level timing.

    Attributes:
        trace_id: Primary key (X-Trace-Id of the request).
        method: HTTP method.
        path: Request path.
        status_code: Response status code.
        duration_ms: Total duration in milliseconds.
        timing: Per-phase breakdown.
        user_agent: Client user agent.
        ip: Client IP.
        timestamp: When the trace was recorded (UTC).
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
    timestamp: datetime
    user_id: int | None = None

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx responses."""
        return self.status_code >= 400
