"""Alert rule defaults and delivery channels."""

from src.infrastructure.alerts.channels import EmailChannel, LogChannel, SentryChannel
from src.infrastructure.alerts.config import DEFAULT_ALERT_RULES

__all__ = ["DEFAULT_ALERT_RULES", "EmailChannel", "LogChannel", "SentryChannel"]
