"""Traces resource router.

Endpoints:
    GET /api/traces            - Recent traces (filterable, paginated)
    GET /api/traces/stats      - Overall statistics
    GET /api/traces/hourly     - Per-hour statistics
    GET /api/traces/endpoints  - Busiest endpoints
    GET /api/traces/stream     - Live TraceCreated events (SSE)
    GET /api/traces/{trace_id} - Single trace
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from src.application.services import TraceService
from src.core.container import get_event_stream, get_trace_service
from src.domain.events import TraceCreated
from src.domain.value_objects import TraceFilters
from src.infrastructure.sse.event_stream import EventStream
from src.presentation.routers.api.streams import event_stream_response
from src.schemas.observability_schemas import (
    EndpointStatsResponse,
    HourlyStatsResponse,
    TraceResponse,
    TraceStatsResponse,
)

router = APIRouter(prefix="/traces", tags=["Traces"])

TraceServiceDep = Annotated[TraceService, Depends(get_trace_service)]


@router.get("", response_model=list[TraceResponse])
async def list_traces(
    trace_service: TraceServiceDep,
    method: Annotated[str | None, Query(description="Exact HTTP method")] = None,
    path: Annotated[str | None, Query(description="Path substring")] = None,
    status_code: Annotated[int | None, Query(alias="statusCode")] = None,
    min_duration: Annotated[float | None, Query(alias="minDuration", ge=0)] = None,
    max_duration: Annotated[float | None, Query(alias="maxDuration", ge=0)] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[TraceResponse]:
    """List recent traces, newest first."""
    traces = await trace_service.get_recent_traces(
        TraceFilters(
            method=method.upper() if method else None,
            path=path,
            status_code=status_code,
            min_duration=min_duration,
            max_duration=max_duration,
            limit=limit,
            offset=offset,
        )
    )
    return [TraceResponse.from_domain(trace) for trace in traces]


@router.get("/stats", response_model=TraceStatsResponse)
async def get_trace_stats(trace_service: TraceServiceDep) -> TraceStatsResponse:
    return TraceStatsResponse.from_domain(await trace_service.get_stats())


@router.get("/hourly", response_model=list[HourlyStatsResponse])
async def get_hourly_stats(
    trace_service: TraceServiceDep,
    hours: Annotated[int, Query(ge=1, le=24 * 30)] = 24,
) -> list[HourlyStatsResponse]:
    """Per-hour statistics, oldest hour first; idle hours are omitted."""
    stats = await trace_service.get_hourly_stats(hours)
    return [HourlyStatsResponse.from_domain(bucket) for bucket in stats]


@router.get("/endpoints", response_model=list[EndpointStatsResponse])
async def get_endpoint_stats(
    trace_service: TraceServiceDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[EndpointStatsResponse]:
    stats = await trace_service.get_endpoint_stats(limit)
    return [EndpointStatsResponse.from_domain(entry) for entry in stats]


@router.get("/stream", response_class=StreamingResponse)
async def stream_traces(
    request: Request,
    stream: Annotated[EventStream, Depends(get_event_stream)],
) -> StreamingResponse:
    """Push each new trace as an SSE ``data:`` frame."""
    return event_stream_response(request, stream, {TraceCreated})


@router.get("/{trace_id}", response_model=TraceResponse)
async def get_trace(trace_id: UUID, trace_service: TraceServiceDep) -> TraceResponse:
    trace = await trace_service.get_trace_by_id(trace_id)
    if trace is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trace {trace_id} not found",
        )
    return TraceResponse.from_domain(trace)
