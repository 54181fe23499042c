"""Repository implementations (SQLAlchemy adapters).

Each repository opens one session per call through ``Database`` so it can
be shared by request handlers and scheduled jobs.
"""

from src.infrastructure.persistence.repositories.alert_history_repository import (
    AlertHistoryRepository,
)
from src.infrastructure.persistence.repositories.rate_limit_repository import (
    RateLimitRepository,
)
from src.infrastructure.persistence.repositories.trace_repository import (
    TraceRepository,
)

__all__ = [
    "AlertHistoryRepository",
    "RateLimitRepository",
    "TraceRepository",
]
