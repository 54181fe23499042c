"""Request/response schemas for API endpoints.

All Pydantic models for HTTP request validation and response serialization.
Schemas are kept separate from domain entities (HTTP-layer concerns only).

Usage:
    from src.schemas import TraceResponse, RateLimitRuleSchema
"""

from src.schemas.observability_schemas import (
    # Traces
    EndpointStatsResponse,
    HourlyStatsResponse,
    PhaseTimingSchema,
    TraceResponse,
    TraceStatsResponse,
    # Alerts
    AlertHistoryResponse,
    AlertRuleResponse,
    ResolveAlertRequest,
    # Rate limiting
    RateLimitRuleSchema,
    # System
    HealthResponse,
    # Streams
    event_payload,
)

__all__ = [
    # Traces
    "EndpointStatsResponse",
    "HourlyStatsResponse",
    "PhaseTimingSchema",
    "TraceResponse",
    "TraceStatsResponse",
    # Alerts
    "AlertHistoryResponse",
    "AlertRuleResponse",
    "ResolveAlertRequest",
    # Rate limiting
    "RateLimitRuleSchema",
    # System
    "HealthResponse",
    # Streams
    "event_payload",
]
