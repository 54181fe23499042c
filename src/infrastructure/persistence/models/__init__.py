"""Database models for persistence layer.

These are infrastructure concerns and should not be imported by the
domain layer.

Models Organization:
    - request_trace.py: Request traces (append-only, TTL cleanup)
    - alert_history.py: Triggered alerts (resolve, retention cleanup)
    - rate_limit_entry.py: Sliding-window counters (atomic upsert)

Note:
    Domain entities (dataclasses) live in src/domain/entities/ and are
    mapped to and from these models by the repository layer.
"""

from src.infrastructure.persistence.models.alert_history import AlertHistoryModel
from src.infrastructure.persistence.models.rate_limit_entry import RateLimitEntryModel
from src.infrastructure.persistence.models.request_trace import RequestTraceModel

__all__ = [
    "AlertHistoryModel",
    "RateLimitEntryModel",
    "RequestTraceModel",
]
