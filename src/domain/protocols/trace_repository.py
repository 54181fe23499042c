"""Request trace storage protocol (port)."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.request_trace import RequestTrace
from src.domain.value_objects.trace_values import (
    EndpointStats,
    HourlyStats,
    TraceFilters,
    TraceStats,
)


class TraceRepositoryProtocol(Protocol):
    """Persistence and aggregation for request traces.

    Storage errors propagate to the caller.
    """

    async def save(self, trace: RequestTrace) -> RequestTrace:
        """Insert a trace."""
        ...

    async def find_by_id(self, trace_id: UUID) -> RequestTrace | None:
        """Lookup a trace by id."""
        ...

    async def find_recent(self, filters: TraceFilters) -> list[RequestTrace]:
        """Filtered page of traces, newest first."""
        ...

    async def count(self) -> int:
        """Number of retained traces."""
        ...

    async def get_stats(self) -> TraceStats:
        """Overall count, mean duration and error percentage (0 when empty)."""
        ...

    async def get_hourly_stats(self, since: datetime) -> list[HourlyStats]:
        """Per-hour statistics for traces at or after ``since``.

        Hours without traces are omitted. Sorted oldest hour first.
        """
        ...

    async def get_endpoint_stats(self, limit: int) -> list[EndpointStats]:
        """Statistics per (path, method), busiest first."""
        ...

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete traces with ``timestamp < cutoff``; return the count."""
        ...
