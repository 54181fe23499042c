"""Repository dependency factories.

Repositories open one session per call against the shared Database, so
they are app-scoped singletons usable from both requests and scheduled
jobs.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.container.infrastructure import get_database

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import (
        AlertHistoryRepository,
        RateLimitRepository,
        TraceRepository,
    )


# ============================================================================
# Repository Factories (App-Scoped)
# ============================================================================


@lru_cache()
def get_rate_limit_repository() -> "RateLimitRepository":
    """Get rate limit counter repository.

    Raises:
        ValueError: If the configured database has no atomic upsert support.
    """
    from src.infrastructure.persistence.repositories import RateLimitRepository

    return RateLimitRepository(database=get_database())


@lru_cache()
def get_trace_repository() -> "TraceRepository":
    from src.infrastructure.persistence.repositories import TraceRepository

    return TraceRepository(database=get_database())


@lru_cache()
def get_alert_history_repository() -> "AlertHistoryRepository":
    from src.infrastructure.persistence.repositories import AlertHistoryRepository

    return AlertHistoryRepository(database=get_database())
