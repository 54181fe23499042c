"""Alerts resource router.

Endpoints:
    GET  /api/alerts                     - Recent alert history
    GET  /api/alerts/unresolved          - Unresolved alerts
    GET  /api/alerts/rules               - Configured alert rules
    GET  /api/alerts/stream              - Live AlertTriggered events (SSE)
    POST /api/alerts/{alert_id}/resolve  - Resolve an alert
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from src.application.services import TraceAlertService
from src.core.container import get_event_stream, get_trace_alert_service
from src.domain.events import AlertTriggered
from src.infrastructure.sse.event_stream import EventStream
from src.presentation.routers.api.streams import event_stream_response
from src.schemas.observability_schemas import (
    AlertHistoryResponse,
    AlertRuleResponse,
    ResolveAlertRequest,
)

router = APIRouter(prefix="/alerts", tags=["Alerts"])

AlertServiceDep = Annotated[TraceAlertService, Depends(get_trace_alert_service)]


@router.get("", response_model=list[AlertHistoryResponse])
async def list_alerts(
    alert_service: AlertServiceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 20,
) -> list[AlertHistoryResponse]:
    """Most recently triggered alerts first."""
    alerts = await alert_service.get_recent_alerts(limit)
    return [AlertHistoryResponse.from_domain(alert) for alert in alerts]


@router.get("/unresolved", response_model=list[AlertHistoryResponse])
async def list_unresolved_alerts(
    alert_service: AlertServiceDep,
) -> list[AlertHistoryResponse]:
    alerts = await alert_service.get_unresolved_alerts()
    return [AlertHistoryResponse.from_domain(alert) for alert in alerts]


@router.get("/rules", response_model=list[AlertRuleResponse])
async def list_alert_rules(alert_service: AlertServiceDep) -> list[AlertRuleResponse]:
    return [AlertRuleResponse.from_domain(rule) for rule in alert_service.get_alert_rules()]


@router.get("/stream", response_class=StreamingResponse)
async def stream_alerts(
    request: Request,
    stream: Annotated[EventStream, Depends(get_event_stream)],
) -> StreamingResponse:
    return event_stream_response(request, stream, {AlertTriggered})


@router.post("/{alert_id}/resolve", response_model=AlertHistoryResponse)
async def resolve_alert(
    alert_id: int,
    alert_service: AlertServiceDep,
    payload: Annotated[ResolveAlertRequest | None, Body()] = None,
) -> AlertHistoryResponse:
    """Mark an alert resolved; notes are optional."""
    notes = payload.notes if payload else None
    alert = await alert_service.resolve_alert(alert_id, notes)
    if alert is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Alert {alert_id} not found",
        )
    return AlertHistoryResponse.from_domain(alert)
