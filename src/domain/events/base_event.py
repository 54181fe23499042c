"""Base domain event class.

Domain events represent "things that happened" and are named in past
tense (TraceCreated, AlertTriggered). They are delivered in-process by the
event bus to live subscribers such as the server-sent events stream.

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (UUID) for event tracking
    - occurred_at timestamp (UTC) for event ordering
    - ``topic`` names the event on the wire (e.g. "trace.created")
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID, uuid4


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    All domain events MUST:
        1. Inherit from this base class
        2. Use past tense naming
        3. Be frozen dataclasses with kw_only=True
        4. Set a dotted ``topic`` class attribute

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: Timestamp when the event occurred (UTC).
    """

    topic: ClassVar[str] = "domain.event"

    event_id: UUID = field(default_factory=uuid4)
    """Unique identifier for this event instance."""

    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    """Timestamp when the event occurred (UTC timezone)."""
