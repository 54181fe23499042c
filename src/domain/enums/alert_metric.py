"""Alert metric enumeration.

Windowed trace statistics an alert rule can be evaluated against.
"""

from enum import Enum


class AlertMetric(str, Enum):
    """Metric an alert rule compares against its threshold."""

    AVG_DURATION = "avgDuration"
    """Mean request duration in milliseconds."""

    ERROR_RATE = "errorRate"
    """Percentage (0-100) of requests with status code >= 400."""

    P95_DURATION = "p95Duration"
    """95th percentile request duration in milliseconds."""
