"""In-memory event bus implementation.

Implements EventBusProtocol with a dictionary-based handler registry. The
service is single-process, so in-process, at-most-once delivery is all the
live streams need.

Architecture:
    - Dictionary-based handler registry (event_type -> list of handlers)
    - Fail-open behavior (one handler failure doesn't break others)
    - Concurrent handler execution (asyncio.gather)

Usage:
    >>> event_bus = get_event_bus()
    >>> event_bus.subscribe(TraceCreated, stream.handle)
    >>> await event_bus.publish(TraceCreated(trace=trace))
"""

import asyncio
from collections import defaultdict

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol


class InMemoryEventBus:
    """In-memory event bus with fail-open behavior.

    Thread Safety:
        NOT thread-safe. Subscribe and publish from the event loop only.

    Attributes:
        _handlers: Event class -> async handlers (exact type match only).
        _logger: Logger for handler failures and event publishing.

    Example:
        >>> bus = InMemoryEventBus(logger=logger)
        >>> bus.subscribe(AlertTriggered, stream.handle)
        >>> bus.subscribe(AlertTriggered, audit_alert)
        >>> await bus.publish(event)  # both run; a failure in one is logged
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        """Initialize event bus with logger.

        Args:
            logger: Logger for handler failures (warning) and event
                publishing (debug).
        """
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._logger = logger

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register event handler for specific event type.

        Args:
            event_type: Class of event to handle. Only exact type matches.
            handler: Async function accepting the event.
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Remove a handler; unknown handlers are ignored.

        Used by stream adapters when a client disconnects.
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        """Number of handlers registered for ``event_type``."""
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        """Publish event to all registered handlers.

        Executes all handlers concurrently. Handler exceptions are logged
        but NOT propagated to the publisher. No handlers is a no-op.

        Args:
            event: Domain event to publish.
        """
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            return

        self._logger.debug(
            "event_publishing",
            event_type=event_type.__name__,
            topic=event.topic,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event_type.__name__,
                    event_id=str(event.event_id),
                    handler_name=getattr(handler, "__name__", repr(handler)),
                    error_type=type(result).__name__,
                    error_message=str(result),
                )
