"""Error-tracking adapters."""

from src.infrastructure.error_tracking.sentry_adapter import SentryAdapter

__all__ = ["SentryAdapter"]
