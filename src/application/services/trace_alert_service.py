"""Trace alert service.

Evaluates alert rules against windowed trace statistics and delivers
triggered alerts to their channels.

Rule lifecycle:
    Idle -> Evaluating -> Triggered | NotTriggered
    Triggered -> InCooldown for ``cooldown_minutes``. Breaches during the
    cooldown are still evaluated and reported as in_cooldown, but nothing
    is delivered or recorded.

Failure isolation:
    - One rule failing to evaluate does not stop the other rules
    - One channel failing to send does not stop the other channels, and
      the history row is written before any channel is tried

Cooldowns live in process memory only and reset on restart.
"""

import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from src.application.services.trace_service import TraceService
from src.core.clock import Clock, utc_now
from src.domain.entities.alert_history import AlertHistory
from src.domain.events import AlertTriggered
from src.domain.protocols.alert_channel_protocol import AlertChannelProtocol
from src.domain.protocols.alert_history_repository import (
    AlertHistoryRepositoryProtocol,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.alert_rule import (
    AlertCheckResult,
    AlertRule,
    WindowStats,
)
from src.infrastructure.alerts.config import DEFAULT_ALERT_RULES

DEFAULT_RETENTION_DAYS = 30


class TraceAlertService:
    """Threshold alerting over request traces.

    Dependencies (injected via constructor):
        - TraceService: windowed statistics
        - AlertHistoryRepositoryProtocol: audit trail
        - AlertChannelProtocol instances, looked up by channel_id
        - EventBusProtocol: AlertTriggered for live subscribers

    Args:
        trace_service: Source of trace statistics.
        history_repository: Alert history storage.
        channels: Available delivery channels.
        event_bus: Event bus.
        logger: Structured logger.
        rules: Alert rules.
        retention_days: Age after which resolved alerts are deleted.
        clock: Time source.
    """

    def __init__(
        self,
        *,
        trace_service: TraceService,
        history_repository: AlertHistoryRepositoryProtocol,
        channels: Iterable[AlertChannelProtocol],
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        rules: Iterable[AlertRule] = DEFAULT_ALERT_RULES,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Clock = utc_now,
    ) -> None:
        self._trace_service = trace_service
        self._history_repository = history_repository
        self._channels = {channel.channel_id: channel for channel in channels}
        self._event_bus = event_bus
        self._logger = logger
        self._rules: tuple[AlertRule, ...] = tuple(rules)
        self._retention = timedelta(days=retention_days)
        self._clock = clock
        self._cooldowns: dict[str, datetime] = {}

    async def check_alerts(self) -> list[AlertCheckResult]:
        """Evaluate every enabled rule once.

        Returns:
            list[AlertCheckResult]: Results of the rules that evaluated
            without error.
        """
        results: list[AlertCheckResult] = []
        for rule in self._rules:
            if not rule.enabled:
                continue
            try:
                results.append(await self.evaluate_rule(rule))
            except Exception as e:
                self._logger.error(
                    "Alert rule evaluation failed", error=e, rule=rule.name
                )
        return results

    async def evaluate_rule(self, rule: AlertRule) -> AlertCheckResult:
        """Evaluate one rule and trigger it when breached outside cooldown."""
        window = await self.get_window_stats(rule.window_minutes)
        current_value = window.value_for(rule.metric)
        triggered = current_value > rule.threshold
        in_cooldown = self.is_in_cooldown(rule.name)

        if triggered and not in_cooldown:
            await self.trigger_alert(rule, current_value)

        return AlertCheckResult(
            rule_name=rule.name,
            triggered=triggered,
            current_value=current_value,
            threshold=rule.threshold,
            in_cooldown=in_cooldown,
        )

    async def get_window_stats(self, window_minutes: int) -> WindowStats:
        """Metric snapshot for an evaluation window.

        Uses the most recent hourly bucket within
        ``max(1, ceil(window_minutes / 60))`` hours. Without any bucket it
        falls back to overall statistics with ``p95 = 2 * avg``.
        """
        hours = max(1, math.ceil(window_minutes / 60))
        hourly = await self._trace_service.get_hourly_stats(hours)

        if hourly:
            latest = hourly[-1]
            return WindowStats(
                count=latest.count,
                avg_duration=latest.avg_duration,
                error_rate=latest.error_rate,
                p95_duration=latest.p95_duration,
            )

        overall = await self._trace_service.get_stats()
        return WindowStats(
            count=overall.total_count,
            avg_duration=overall.avg_duration,
            error_rate=overall.error_rate,
            p95_duration=overall.avg_duration * 2,
        )

    async def trigger_alert(self, rule: AlertRule, current_value: float) -> AlertHistory:
        """Start the cooldown, record the alert and deliver it.

        Returns:
            AlertHistory: The persisted history row.
        """
        self._logger.warning(
            "Alert triggered",
            rule=rule.name,
            metric=rule.metric.value,
            value=round(current_value, 2),
            threshold=rule.threshold,
        )

        triggered_at = self._clock()
        self._cooldowns[rule.name] = triggered_at + timedelta(
            minutes=rule.cooldown_minutes
        )

        stats = await self._trace_service.get_stats()

        history = await self._history_repository.save(
            AlertHistory(
                rule_name=rule.name,
                metric=rule.metric.value,
                threshold=rule.threshold,
                actual_value=current_value,
                triggered_at=triggered_at,
                channels=[channel.value for channel in rule.channels],
            )
        )

        for channel_type in rule.channels:
            channel = self._channels.get(channel_type.value)
            if channel is None:
                self._logger.warning(
                    "Alert channel not registered",
                    rule=rule.name,
                    channel=channel_type.value,
                )
                continue
            if not channel.is_enabled():
                continue
            try:
                await channel.send(rule, stats, current_value)
            except Exception as e:
                self._logger.error(
                    "Alert channel delivery failed",
                    error=e,
                    rule=rule.name,
                    channel=channel_type.value,
                )

        await self._event_bus.publish(
            AlertTriggered(
                rule=rule,
                current_value=current_value,
                triggered_at=triggered_at,
                context={
                    "windowMinutes": rule.window_minutes,
                    "totalRequests": stats.total_count,
                },
            )
        )
        return history

    def is_in_cooldown(self, rule_name: str) -> bool:
        """Check whether deliveries for ``rule_name`` are suppressed."""
        until = self._cooldowns.get(rule_name)
        if until is None:
            return False
        if self._clock() < until:
            return True
        del self._cooldowns[rule_name]
        return False

    def clear_cooldown(self, rule_name: str) -> None:
        """Lift the cooldown of a rule (no-op when none is active)."""
        self._cooldowns.pop(rule_name, None)

    def get_alert_rules(self) -> list[AlertRule]:
        """Return a copy of the configured rules."""
        return list(self._rules)

    async def get_recent_alerts(self, limit: int = 20) -> list[AlertHistory]:
        return await self._history_repository.find_recent(limit)

    async def get_unresolved_alerts(self) -> list[AlertHistory]:
        return await self._history_repository.find_unresolved()

    async def resolve_alert(
        self, alert_id: int, notes: str | None = None
    ) -> AlertHistory | None:
        """Mark an alert resolved.

        Args:
            alert_id: History row id.
            notes: Optional operator notes.

        Returns:
            AlertHistory | None: Updated alert, or None if the id is unknown.
        """
        history = await self._history_repository.find_by_id(alert_id)
        if history is None:
            return None
        history.resolve(notes, now=self._clock())
        return await self._history_repository.update(history)

    async def cleanup_old_alerts(self) -> int:
        """Delete resolved alerts older than the retention period.

        Returns:
            int: Number of alerts deleted.
        """
        cutoff = self._clock() - self._retention
        deleted = await self._history_repository.delete_resolved_before(cutoff)
        if deleted > 0:
            self._logger.info("Cleaned up old alerts", deleted=deleted)
        return deleted
