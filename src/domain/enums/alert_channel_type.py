"""Alert channel identifiers and severities."""

from enum import Enum


class AlertChannelType(str, Enum):
    """Delivery backends an alert rule can route to."""

    SENTRY = "sentry"
    EMAIL = "email"
    LOG = "log"


class AlertSeverity(str, Enum):
    """Severity attached to alerts sent to the error tracker.

    Values match the level names accepted by the Sentry SDK.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
