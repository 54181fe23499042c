"""Log alert channel.

Always enabled. Writes one multi-line warning per alert.
"""

from src.domain.enums import AlertChannelType
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.alert_rule import AlertRule
from src.domain.value_objects.trace_values import TraceStats


def format_alert_message(
    rule: AlertRule, stats: TraceStats, actual_value: float
) -> str:
    """Render the alert summary logged by this channel."""
    return "\n".join(
        (
            f"[ALERT] {rule.name}",
            f"  Metric: {rule.metric.value}",
            f"  Threshold: {rule.threshold}",
            f"  Actual: {actual_value:.2f}",
            f"  Window: {rule.window_minutes} minutes",
            (
                f"  Stats: {stats.total_count} requests, "
                f"{stats.avg_duration:.2f}ms avg, "
                f"{stats.error_rate:.2f}% errors"
            ),
        )
    )


class LogChannel:
    """Alert channel that writes to the application log."""

    channel_id = AlertChannelType.LOG.value

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    def is_enabled(self) -> bool:
        return True

    async def send(
        self, rule: AlertRule, stats: TraceStats, actual_value: float
    ) -> None:
        self._logger.warning(
            format_alert_message(rule, stats, actual_value),
            alert=rule.name,
            metric=rule.metric.value,
            threshold=rule.threshold,
            actual_value=round(actual_value, 2),
        )
