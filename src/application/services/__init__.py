"""Application services."""

from src.application.services.rate_limit_service import RateLimitService
from src.application.services.trace_alert_service import TraceAlertService
from src.application.services.trace_service import TraceService

__all__ = ["RateLimitService", "TraceAlertService", "TraceService"]
