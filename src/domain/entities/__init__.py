"""Domain entities.

Pure business data returned by repositories. ORM models never leave the
infrastructure layer.
"""

from src.domain.entities.alert_history import AlertHistory
from src.domain.entities.rate_limit_entry import RateLimitEntry
from src.domain.entities.request_trace import RequestTrace

__all__ = ["AlertHistory", "RateLimitEntry", "RequestTrace"]
