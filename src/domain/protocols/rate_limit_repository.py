"""Rate limit counter storage protocol (port).

Implementations MUST make ``increment_or_create`` a single atomic
operation per key: concurrent requests for the same key may neither lose
increments nor double-count. Storage errors propagate to the caller.
"""

from typing import Protocol

from src.domain.entities.rate_limit_entry import RateLimitEntry


class RateLimitRepositoryProtocol(Protocol):
    """Storage for sliding-window counters."""

    async def increment_or_create(
        self, key: str, window_ms: int, now_ms: int
    ) -> RateLimitEntry:
        """Atomically count one request for ``key``.

        If no entry exists, or ``now_ms >= window_start + window_ms``, the
        entry becomes ``count=1, window_start=now_ms``. Otherwise ``count``
        is incremented. ``expires_at`` is set to ``window_start + 2 * window_ms``
        on create or reset and left alone otherwise.

        Returns:
            RateLimitEntry: The entry after the update.
        """
        ...

    async def delete_expired(self, now_ms: int) -> int:
        """Delete entries with ``expires_at < now_ms``; return the count."""
        ...

    async def find_by_key(self, key: str) -> RateLimitEntry | None:
        """Lookup one entry (debugging)."""
        ...

    async def find_all(self) -> list[RateLimitEntry]:
        """All entries ordered by key (debugging)."""
        ...
