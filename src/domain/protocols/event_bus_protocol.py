"""Event bus protocol (port) for domain events.

The domain defines the interface, infrastructure provides the in-memory
adapter, and the container wires it.

Usage:
    >>> event_bus = get_event_bus()
    >>> await event_bus.publish(TraceCreated(trace=trace))
    >>>
    >>> async def on_trace(event: DomainEvent) -> None:
    ...     queue.put_nowait(event)
    >>> event_bus.subscribe(TraceCreated, on_trace)
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Async handler: accepts one event, returns None, handles its own errors."""


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        1. **Fail-open behavior**: One handler failure must NOT prevent other
           handlers from executing, and publish never raises.
        2. **Async support**: All handlers are async.
        3. **Type safety**: Handlers registered for an event type only
           receive events of that type.
        4. **No ordering guarantees**: Handlers execute concurrently.
    """

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """Register an async handler for an event type."""
        ...

    def unsubscribe(
        self, event_type: type[DomainEvent], handler: EventHandler
    ) -> None:
        """Remove a previously registered handler (no-op when absent)."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Deliver an event to every handler registered for its type."""
        ...
