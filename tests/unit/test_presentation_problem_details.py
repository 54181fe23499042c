"""Unit tests for RFC 7807 problem details and stream payloads.

Tests cover:
- ProblemDetails camelCase serialization without null members
- RateLimitProblem extra members
- event_payload for TraceCreated and AlertTriggered
- Rate limit rule schema conversion and validation
"""

from datetime import UTC, datetime
from uuid import UUID

import pytest
from pydantic import ValidationError

from src.domain.entities import AlertHistory, RequestTrace
from src.domain.enums import AlertChannelType, AlertMetric, RateLimitKeyStrategy
from src.domain.events import AlertTriggered, DomainEvent, TraceCreated
from src.domain.value_objects import AlertRule, PhaseTiming, RateLimitRule
from src.presentation.routers.api.errors import (
    ErrorDetail,
    ProblemDetails,
    RateLimitProblem,
    problem_type,
)
from src.schemas.observability_schemas import (
    AlertHistoryResponse,
    RateLimitRuleSchema,
    event_payload,
)

TRACE_ID = UUID("12345678-1234-5678-1234-567812345678")


@pytest.mark.unit
class TestProblemDetails:
    """Tests for ProblemDetails serialization."""

    def test_to_content_uses_camel_case_and_drops_nulls(self):
        problem = ProblemDetails(
            type=problem_type("not-found"),
            title="Resource Not Found",
            status=404,
            detail="Trace 42 not found",
            instance="/api/traces/42",
            trace_id="abc",
        )

        assert problem.to_content() == {
            "type": "/errors/not-found",
            "title": "Resource Not Found",
            "status": 404,
            "detail": "Trace 42 not found",
            "instance": "/api/traces/42",
            "traceId": "abc",
        }

    def test_field_errors_are_included(self):
        problem = ProblemDetails(
            type=problem_type("validation-failed"),
            title="Validation Failed",
            status=422,
            detail="Request validation failed.",
            instance="/api/rate-limit/rules",
            errors=[
                ErrorDetail(field="0.windowMs", code="greater_than", message="too small")
            ],
        )

        content = problem.to_content()

        assert content["errors"] == [
            {"field": "0.windowMs", "code": "greater_than", "message": "too small"}
        ]
        assert "traceId" not in content

    def test_rate_limit_problem_members(self):
        problem = RateLimitProblem(
            type=problem_type("rate-limit-exceeded"),
            title="Too Many Requests",
            status=429,
            detail="Too many requests. Please try again in 7 seconds.",
            instance="/api/auth/login",
            retry_after=7,
        )

        content = problem.to_content()

        assert content["statusCode"] == 429
        assert content["message"] == "Rate limit exceeded"
        assert content["retryAfter"] == 7


def _trace() -> RequestTrace:
    return RequestTrace(
        trace_id=TRACE_ID,
        method="POST",
        path="/api/auth/login",
        status_code=401,
        duration_ms=18.25,
        timing=PhaseTiming(middleware=0.5, guard=1.25, handler=16.5),
        user_id=7,
        user_agent="pytest",
        ip="203.0.113.7",
        timestamp=datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
    )


RULE = AlertRule(
    name="High Error Rate",
    metric=AlertMetric.ERROR_RATE,
    threshold=10,
    window_minutes=5,
    cooldown_minutes=15,
    channels=(AlertChannelType.SENTRY, AlertChannelType.LOG),
)


@pytest.mark.unit
class TestEventPayload:
    """Tests for SSE payloads."""

    def test_trace_created_payload(self):
        event = TraceCreated(trace=_trace())

        payload = event_payload(event)

        assert payload["type"] == "trace.created"
        assert payload["eventId"] == str(event.event_id)
        data = payload["data"]
        assert data["traceId"] == str(TRACE_ID)
        assert data["statusCode"] == 401
        assert data["durationMs"] == 18.25
        assert data["userId"] == 7
        assert data["timing"] == {
            "middleware": 0.5,
            "guard": 1.25,
            "interceptorPre": 0.0,
            "handler": 16.5,
            "interceptorPost": 0.0,
        }

    def test_alert_triggered_payload(self):
        event = AlertTriggered(
            rule=RULE,
            current_value=25.5,
            triggered_at=datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
            context={"windowMinutes": 5, "totalRequests": 40},
        )

        payload = event_payload(event)

        assert payload["type"] == "alert.triggered"
        assert payload["data"] == {
            "rule": {
                "name": "High Error Rate",
                "metric": "errorRate",
                "threshold": 10.0,
                "windowMinutes": 5,
                "cooldownMinutes": 15,
                "channels": ["sentry", "log"],
                "enabled": True,
            },
            "currentValue": 25.5,
            "triggeredAt": "2025-01-15T12:00:00+00:00",
            "context": {"windowMinutes": 5, "totalRequests": 40},
        }

    def test_other_events_are_rejected(self):
        with pytest.raises(TypeError, match="not streamed"):
            event_payload(DomainEvent())


@pytest.mark.unit
class TestSchemas:
    """Tests for request/response schema conversion."""

    def test_rate_limit_rule_round_trip_through_camel_case(self):
        schema = RateLimitRuleSchema.model_validate(
            {"path": "/api/blog", "windowMs": 60000, "maxRequests": 10, "keyStrategy": "user"}
        )

        assert schema.to_domain() == RateLimitRule(
            path="/api/blog",
            window_ms=60_000,
            max_requests=10,
            key_strategy=RateLimitKeyStrategy.USER,
        )

    @pytest.mark.parametrize(
        "payload",
        [
            {"path": "api/blog", "windowMs": 1000, "maxRequests": 1},
            {"path": "/api/blog", "windowMs": 0, "maxRequests": 1},
            {"path": "/api/blog", "windowMs": 1000, "maxRequests": -1},
            {"path": "/api/blog", "windowMs": 1000, "maxRequests": 1, "keyStrategy": "x"},
        ],
    )
    def test_invalid_rule_rejected(self, payload):
        with pytest.raises(ValidationError):
            RateLimitRuleSchema.model_validate(payload)

    def test_unsaved_alert_history_cannot_be_serialized(self):
        history = AlertHistory(
            rule_name="High Error Rate",
            metric="errorRate",
            threshold=10,
            actual_value=25.5,
            triggered_at=datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
            channels=["log"],
        )

        with pytest.raises(ValueError, match="persisted"):
            AlertHistoryResponse.from_domain(history)
