"""Alert history storage protocol (port)."""

from datetime import datetime
from typing import Protocol

from src.domain.entities.alert_history import AlertHistory


class AlertHistoryRepositoryProtocol(Protocol):
    """Persistence for triggered alerts."""

    async def save(self, history: AlertHistory) -> AlertHistory:
        """Insert a new row; returns the entity with its id assigned."""
        ...

    async def update(self, history: AlertHistory) -> AlertHistory:
        """Persist resolution fields of an existing row."""
        ...

    async def find_by_id(self, alert_id: int) -> AlertHistory | None:
        """Lookup one row."""
        ...

    async def find_recent(self, limit: int) -> list[AlertHistory]:
        """Latest rows by triggered_at, newest first."""
        ...

    async def find_unresolved(self) -> list[AlertHistory]:
        """Unresolved rows, newest first."""
        ...

    async def delete_resolved_before(self, cutoff: datetime) -> int:
        """Delete resolved rows triggered before ``cutoff``; return the count."""
        ...
