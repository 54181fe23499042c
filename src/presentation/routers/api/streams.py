"""Server-Sent Events helpers shared by the trace and alert streams.

Each connected client gets its own bounded queue on the EventStream; events
are rendered as ``data: <json>\\n\\n``. A comment line is sent when nothing
arrived within the heartbeat interval so proxies keep the connection open.
"""

import json
from collections.abc import AsyncGenerator

from fastapi import Request
from fastapi.responses import StreamingResponse

from src.domain.events.base_event import DomainEvent
from src.infrastructure.sse.event_stream import EventStream
from src.schemas.observability_schemas import event_payload

SSE_RETRY_INTERVAL_MS = 3000
HEARTBEAT_SECONDS = 15.0

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable proxy buffering
}


def format_sse(event: DomainEvent) -> str:
    """Render one event as an SSE data frame."""
    return f"data: {json.dumps(event_payload(event))}\n\n"


def event_stream_response(
    request: Request,
    stream: EventStream,
    event_types: set[type[DomainEvent]],
    heartbeat_seconds: float = HEARTBEAT_SECONDS,
) -> StreamingResponse:
    """Stream ``event_types`` from ``stream`` until the client disconnects."""

    async def event_generator() -> AsyncGenerator[str, None]:
        yield f"retry: {SSE_RETRY_INTERVAL_MS}\n\n"

        async with stream.subscribe(event_types, heartbeat_seconds) as events:
            async for event in events:
                if await request.is_disconnected():
                    break
                if event is None:
                    yield ": heartbeat\n\n"
                    continue
                yield format_sse(event)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
