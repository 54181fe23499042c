"""Event bus and event stream factories.

The event bus is the in-process publish/subscribe hub. The event stream
subscribes to it once and fans trace and alert events out to SSE clients.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.container.infrastructure import get_logger

if TYPE_CHECKING:
    from src.domain.protocols.event_bus_protocol import EventBusProtocol
    from src.infrastructure.sse.event_stream import EventStream


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Returns:
        Event bus implementing EventBusProtocol.

    Usage:
        # Application Layer (direct use)
        event_bus = get_event_bus()
        await event_bus.publish(TraceCreated(trace=trace))

        # Presentation Layer (FastAPI Depends)
        event_bus: EventBusProtocol = Depends(get_event_bus)
    """
    from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    return InMemoryEventBus(logger=get_logger())


@lru_cache()
def get_event_stream() -> "EventStream":
    """Get the SSE event stream singleton, attached to TraceCreated and AlertTriggered."""
    from src.domain.events import AlertTriggered, TraceCreated
    from src.infrastructure.sse.event_stream import EventStream

    stream = EventStream(event_bus=get_event_bus(), logger=get_logger())
    stream.attach(TraceCreated, AlertTriggered)
    return stream
