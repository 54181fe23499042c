"""In-process broadcast of domain events to streaming clients.

EventStream subscribes to the event bus once and fans each event out to
every connected client's bounded queue. Delivery is at-most-once: when a
client's queue is full (slow consumer) the event is dropped for that
client only.

Usage:
    stream = EventStream(event_bus=bus, logger=logger)
    stream.attach(TraceCreated, AlertTriggered)

    async with stream.subscribe({TraceCreated}) as events:
        async for event in events:
            ...
"""

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol

DEFAULT_QUEUE_SIZE = 100


@dataclass(slots=True, eq=False)
class _Client:
    event_types: frozenset[type[DomainEvent]]
    queue: asyncio.Queue[DomainEvent]
    dropped: int = field(default=0)


class EventStream:
    """Broadcasts bus events to per-client queues.

    Args:
        event_bus: Bus the stream listens on.
        logger: Logger for drops and lifecycle.
        queue_size: Per-client buffer size.
    """

    def __init__(
        self,
        *,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self._event_bus = event_bus
        self._logger = logger
        self._queue_size = queue_size
        self._clients: set[_Client] = set()
        self._attached: set[type[DomainEvent]] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def attach(self, *event_types: type[DomainEvent]) -> None:
        """Subscribe the stream to the bus for the given event types."""
        for event_type in event_types:
            if event_type in self._attached:
                continue
            self._event_bus.subscribe(event_type, self.handle)
            self._attached.add(event_type)

    def detach(self) -> None:
        """Unsubscribe from the bus."""
        for event_type in self._attached:
            self._event_bus.unsubscribe(event_type, self.handle)
        self._attached.clear()

    async def handle(self, event: DomainEvent) -> None:
        """Event bus handler: enqueue the event for interested clients."""
        for client in list(self._clients):
            if type(event) not in client.event_types:
                continue
            try:
                client.queue.put_nowait(event)
            except asyncio.QueueFull:
                client.dropped += 1
                self._logger.debug(
                    "stream_event_dropped",
                    topic=event.topic,
                    dropped=client.dropped,
                )

    @asynccontextmanager
    async def subscribe(
        self,
        event_types: Iterable[type[DomainEvent]],
        heartbeat_seconds: float | None = None,
    ) -> AsyncIterator[AsyncIterator[DomainEvent | None]]:
        """Register a client for the duration of the context.

        Args:
            event_types: Event classes the client receives.
            heartbeat_seconds: When set, ``None`` is yielded after this many
                idle seconds so the caller can emit a keep-alive.

        Yields:
            Async iterator of events in arrival order.
        """
        client = _Client(
            event_types=frozenset(event_types),
            queue=asyncio.Queue(maxsize=self._queue_size),
        )
        self._clients.add(client)
        try:
            yield self._iterate(client, heartbeat_seconds)
        finally:
            self._clients.discard(client)

    async def _iterate(
        self, client: _Client, heartbeat_seconds: float | None
    ) -> AsyncIterator[DomainEvent | None]:
        while True:
            if heartbeat_seconds is None:
                yield await client.queue.get()
                continue
            try:
                yield await asyncio.wait_for(
                    client.queue.get(), timeout=heartbeat_seconds
                )
            except TimeoutError:
                yield None
