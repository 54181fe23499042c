"""Background job scheduling."""

from src.infrastructure.scheduler.periodic_scheduler import (
    PeriodicScheduler,
    ScheduledJob,
)

__all__ = ["PeriodicScheduler", "ScheduledJob"]
