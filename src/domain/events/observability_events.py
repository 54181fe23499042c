"""Observability domain events.

Events published for live subscribers (SSE streams). Delivery is
in-process and at-most-once; nothing here is durable.

Events:
- TraceCreated: a request trace was persisted
- AlertTriggered: an alert rule fired outside its cooldown
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from src.domain.entities.request_trace import RequestTrace
from src.domain.events.base_event import DomainEvent
from src.domain.value_objects.alert_rule import AlertRule


@dataclass(frozen=True, kw_only=True, slots=True)
class TraceCreated(DomainEvent):
    """Request trace persisted.

    Attributes:
        trace: The full stored trace.
    """

    topic: ClassVar[str] = "trace.created"

    trace: RequestTrace


@dataclass(frozen=True, kw_only=True, slots=True)
class AlertTriggered(DomainEvent):
    """Alert rule fired and was delivered to its channels.

    Attributes:
        rule: The rule that fired.
        current_value: Metric value that breached the threshold.
        triggered_at: Trigger time (UTC).
        context: ``{"windowMinutes": ..., "totalRequests": ...}``.
    """

    topic: ClassVar[str] = "alert.triggered"

    rule: AlertRule
    current_value: float
    triggered_at: datetime
    context: dict[str, int] = field(default_factory=dict)
