"""Error tracking protocol (port).

Abstracts the external error-tracking service (Sentry) used by the
Sentry alert channel and the database capacity monitor.
"""

from typing import Any, Protocol


class ErrorTrackerProtocol(Protocol):
    """External error-tracking client."""

    def is_enabled(self) -> bool:
        """Whether a DSN is configured."""
        ...

    def capture_message(
        self,
        message: str,
        *,
        level: str,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Send a message event with tags and extra context."""
        ...
