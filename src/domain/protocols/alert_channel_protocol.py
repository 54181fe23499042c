"""Alert channel protocol (port).

Channels deliver a triggered alert to one backend (log, Sentry, email).
"""

from typing import Protocol

from src.domain.value_objects.alert_rule import AlertRule
from src.domain.value_objects.trace_values import TraceStats


class AlertChannelProtocol(Protocol):
    """Pluggable alert delivery backend.

    Attributes:
        channel_id: Identifier referenced by AlertRule.channels.
    """

    channel_id: str

    def is_enabled(self) -> bool:
        """Whether the channel is configured and may be sent to."""
        ...

    async def send(
        self, rule: AlertRule, stats: TraceStats, actual_value: float
    ) -> None:
        """Deliver one alert. May raise; the caller isolates failures."""
        ...
