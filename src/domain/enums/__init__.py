"""Domain enums for business logic.

This package contains enumerations used throughout the domain layer.
Enums are centralized here for discoverability and maintainability.

Available Enums:
    - RateLimitKeyStrategy: How rate limit counter keys are built
    - AlertMetric: Trace statistic an alert rule watches
    - AlertChannelType: Alert delivery backends
    - AlertSeverity: Severity sent to the error tracker
"""

from src.domain.enums.alert_channel_type import AlertChannelType, AlertSeverity
from src.domain.enums.alert_metric import AlertMetric
from src.domain.enums.rate_limit_key_strategy import RateLimitKeyStrategy

__all__ = [
    "AlertChannelType",
    "AlertMetric",
    "AlertSeverity",
    "RateLimitKeyStrategy",
]
