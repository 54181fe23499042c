"""Domain value objects.

Immutable, self-validating values shared by the rate limit, tracing and
alerting services.
"""

from src.domain.value_objects.alert_rule import (
    AlertCheckResult,
    AlertRule,
    WindowStats,
)
from src.domain.value_objects.rate_limit_rule import (
    RateLimitCheckResult,
    RateLimitRule,
)
from src.domain.value_objects.trace_values import (
    EndpointStats,
    HourlyStats,
    PhaseTiming,
    TraceFilters,
    TraceInput,
    TraceStats,
)

__all__ = [
    "AlertCheckResult",
    "AlertRule",
    "EndpointStats",
    "HourlyStats",
    "PhaseTiming",
    "RateLimitCheckResult",
    "RateLimitRule",
    "TraceFilters",
    "TraceInput",
    "TraceStats",
    "WindowStats",
]
