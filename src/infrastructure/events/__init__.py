"""Infrastructure event implementations.

Event Bus:
    - InMemoryEventBus: In-process event bus with fail-open behavior

Usage:
    >>> from src.infrastructure.events import InMemoryEventBus
    >>> event_bus = InMemoryEventBus(logger=logger)
    >>> event_bus.subscribe(TraceCreated, stream.handle)
"""

from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

__all__ = [
    "InMemoryEventBus",
]
