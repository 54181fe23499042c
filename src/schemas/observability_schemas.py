"""Observability API schemas.

Request and response models for the trace, alert and rate limit rule
endpoints, plus the JSON payloads pushed over the SSE streams. All wire
names are camelCase.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities.alert_history import AlertHistory
from src.domain.entities.request_trace import RequestTrace
from src.domain.enums import RateLimitKeyStrategy
from src.domain.events import AlertTriggered, TraceCreated
from src.domain.events.base_event import DomainEvent
from src.domain.value_objects import (
    AlertRule,
    EndpointStats,
    HourlyStats,
    PhaseTiming,
    RateLimitRule,
    TraceStats,
)


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Traces
# =============================================================================


class PhaseTimingSchema(CamelModel):
    """Phase breakdown in milliseconds."""

    middleware: float
    guard: float
    interceptor_pre: float
    handler: float
    interceptor_post: float

    @classmethod
    def from_domain(cls, timing: PhaseTiming) -> "PhaseTimingSchema":
        return cls(
            middleware=timing.middleware,
            guard=timing.guard,
            interceptor_pre=timing.interceptor_pre,
            handler=timing.handler,
            interceptor_post=timing.interceptor_post,
        )


class TraceResponse(CamelModel):
    """One recorded request."""

    trace_id: UUID
    method: str
    path: str
    status_code: int
    duration_ms: float
    timing: PhaseTimingSchema
    user_id: int | None = None
    user_agent: str
    ip: str
    timestamp: datetime

    @classmethod
    def from_domain(cls, trace: RequestTrace) -> "TraceResponse":
        return cls(
            trace_id=trace.trace_id,
            method=trace.method,
            path=trace.path,
            status_code=trace.status_code,
            duration_ms=trace.duration_ms,
            timing=PhaseTimingSchema.from_domain(trace.timing),
            user_id=trace.user_id,
            user_agent=trace.user_agent,
            ip=trace.ip,
            timestamp=trace.timestamp,
        )


class TraceStatsResponse(CamelModel):
    total_count: int
    avg_duration: float
    error_rate: float

    @classmethod
    def from_domain(cls, stats: TraceStats) -> "TraceStatsResponse":
        return cls(
            total_count=stats.total_count,
            avg_duration=stats.avg_duration,
            error_rate=stats.error_rate,
        )


class HourlyStatsResponse(CamelModel):
    hour: datetime
    count: int
    avg_duration: float
    error_rate: float
    p95_duration: float

    @classmethod
    def from_domain(cls, stats: HourlyStats) -> "HourlyStatsResponse":
        return cls(
            hour=stats.hour,
            count=stats.count,
            avg_duration=stats.avg_duration,
            error_rate=stats.error_rate,
            p95_duration=stats.p95_duration,
        )


class EndpointStatsResponse(CamelModel):
    path: str
    method: str
    count: int
    avg_duration: float
    error_rate: float

    @classmethod
    def from_domain(cls, stats: EndpointStats) -> "EndpointStatsResponse":
        return cls(
            path=stats.path,
            method=stats.method,
            count=stats.count,
            avg_duration=stats.avg_duration,
            error_rate=stats.error_rate,
        )


# =============================================================================
# Alerts
# =============================================================================


class AlertRuleResponse(CamelModel):
    name: str
    metric: str
    threshold: float
    window_minutes: int
    cooldown_minutes: int
    channels: list[str]
    enabled: bool

    @classmethod
    def from_domain(cls, rule: AlertRule) -> "AlertRuleResponse":
        return cls(
            name=rule.name,
            metric=rule.metric.value,
            threshold=rule.threshold,
            window_minutes=rule.window_minutes,
            cooldown_minutes=rule.cooldown_minutes,
            channels=[channel.value for channel in rule.channels],
            enabled=rule.enabled,
        )


class AlertHistoryResponse(CamelModel):
    """Audit record of a triggered alert."""

    id: int
    rule_name: str
    metric: str
    threshold: float
    actual_value: float
    triggered_at: datetime
    channels: list[str]
    resolved: bool
    resolved_at: datetime | None = None
    notes: str | None = None

    @classmethod
    def from_domain(cls, history: AlertHistory) -> "AlertHistoryResponse":
        if history.id is None:
            raise ValueError("Alert history must be persisted before serialization")
        return cls(
            id=history.id,
            rule_name=history.rule_name,
            metric=history.metric,
            threshold=history.threshold,
            actual_value=history.actual_value,
            triggered_at=history.triggered_at,
            channels=list(history.channels),
            resolved=history.resolved,
            resolved_at=history.resolved_at,
            notes=history.notes,
        )


class ResolveAlertRequest(CamelModel):
    notes: str | None = Field(None, max_length=2000, description="Operator notes")


# =============================================================================
# Rate limit rules
# =============================================================================


class RateLimitRuleSchema(CamelModel):
    """Rate limit rule as exchanged with operators."""

    path: str = Field(..., pattern=r"^/", description="Glob pattern, e.g. /api/**")
    window_ms: int = Field(..., gt=0, description="Window length in milliseconds")
    max_requests: int = Field(..., gt=0, description="Requests allowed per window")
    key_strategy: RateLimitKeyStrategy = Field(
        RateLimitKeyStrategy.IP, description="ip, user or ip+user"
    )

    @classmethod
    def from_domain(cls, rule: RateLimitRule) -> "RateLimitRuleSchema":
        return cls(
            path=rule.path,
            window_ms=rule.window_ms,
            max_requests=rule.max_requests,
            key_strategy=rule.key_strategy,
        )

    def to_domain(self) -> RateLimitRule:
        return RateLimitRule(
            path=self.path,
            window_ms=self.window_ms,
            max_requests=self.max_requests,
            key_strategy=self.key_strategy,
        )


# =============================================================================
# System
# =============================================================================


class HealthResponse(CamelModel):
    status: str
    version: str
    database: bool
    scheduler_running: bool


# =============================================================================
# Stream payloads
# =============================================================================


def event_payload(event: DomainEvent) -> dict[str, Any]:
    """JSON-ready SSE payload for a domain event.

    Returns:
        ``{"type": <topic>, "eventId": ..., "occurredAt": ..., "data": {...}}``

    Raises:
        TypeError: For event types that are not streamed.
    """
    match event:
        case TraceCreated(trace=trace):
            data = TraceResponse.from_domain(trace).model_dump(
                mode="json", by_alias=True
            )
        case AlertTriggered():
            data = {
                "rule": AlertRuleResponse.from_domain(event.rule).model_dump(
                    mode="json", by_alias=True
                ),
                "currentValue": event.current_value,
                "triggeredAt": event.triggered_at.isoformat(),
                "context": dict(event.context),
            }
        case _:
            raise TypeError(f"Event type is not streamed: {type(event).__name__}")

    return {
        "type": event.topic,
        "eventId": str(event.event_id),
        "occurredAt": event.occurred_at.isoformat(),
        "data": data,
    }
