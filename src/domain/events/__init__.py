"""Domain events module.

Usage:
    >>> from src.domain.events import TraceCreated
    >>> await event_bus.publish(TraceCreated(trace=trace))
"""

from src.domain.events.base_event import DomainEvent
from src.domain.events.observability_events import AlertTriggered, TraceCreated

__all__ = ["AlertTriggered", "DomainEvent", "TraceCreated"]
