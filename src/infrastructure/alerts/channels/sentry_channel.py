"""Sentry alert channel.

Sends a message event whose severity grows with how far the metric
overshoots its threshold:

    actual / threshold >= 2.0  -> error
    actual / threshold >= 1.5  -> warning
    otherwise                  -> info
"""

import re
from typing import Any

from src.domain.enums import AlertChannelType, AlertSeverity
from src.domain.protocols.error_tracker_protocol import ErrorTrackerProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.alert_rule import AlertRule
from src.domain.value_objects.trace_values import TraceStats

_WHITESPACE = re.compile(r"\s+")


def severity_for(actual_value: float, threshold: float) -> AlertSeverity:
    """Map the overshoot ratio to a Sentry level.

    A zero threshold counts as an unbounded overshoot.
    """
    if threshold <= 0:
        return AlertSeverity.ERROR
    ratio = actual_value / threshold
    if ratio >= 2:
        return AlertSeverity.ERROR
    if ratio >= 1.5:
        return AlertSeverity.WARNING
    return AlertSeverity.INFO


def alert_slug(name: str) -> str:
    """Lowercase the rule name and replace whitespace runs with '-'."""
    return _WHITESPACE.sub("-", name.lower())


class SentryChannel:
    """Alert channel backed by the error tracker.

    Enabled only when a DSN is configured; sending while disabled logs a
    warning and returns.
    """

    channel_id = AlertChannelType.SENTRY.value

    def __init__(self, tracker: ErrorTrackerProtocol, logger: LoggerProtocol) -> None:
        self._tracker = tracker
        self._logger = logger

    def is_enabled(self) -> bool:
        return self._tracker.is_enabled()

    async def send(
        self, rule: AlertRule, stats: TraceStats, actual_value: float
    ) -> None:
        if not self.is_enabled():
            self._logger.warning("Sentry not configured, skipping alert", alert=rule.name)
            return

        extra: dict[str, Any] = {
            "threshold": rule.threshold,
            "actualValue": actual_value,
            "windowMinutes": rule.window_minutes,
            "stats": {
                "totalCount": stats.total_count,
                "avgDuration": f"{stats.avg_duration:.2f}",
                "errorRate": f"{stats.error_rate:.2f}",
            },
        }
        self._tracker.capture_message(
            f"[Alert] {rule.name}: {rule.metric.value} exceeded",
            level=severity_for(actual_value, rule.threshold).value,
            tags={
                "component": "TraceAlertService",
                "alert": alert_slug(rule.name),
                "metric": rule.metric.value,
            },
            extra=extra,
        )
