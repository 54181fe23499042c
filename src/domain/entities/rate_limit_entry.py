"""Rate limit counter entity.

One entry per composite key. Mutated on every checked request by an
atomic upsert in the repository; removed by cleanup once expired.
"""

from dataclasses import dataclass


@dataclass(slots=True, kw_only=True)
class RateLimitEntry:
    """Sliding-window counter for one key.

    Attributes:
        key: Composite key, ``<strategy>:<identifier>[:<user_id>]:<rule_path>``.
        count: Requests seen in the current window.
        window_start: Epoch milliseconds when the current window began.
        expires_at: ``window_start + 2 * window_ms``. Entries are kept past
            the window end for debugging until cleanup deletes them.
    """

    key: str
    count: int
    window_start: int
    expires_at: int

    def is_expired(self, now_ms: int) -> bool:
        """Check if cleanup may delete this entry."""
        return self.expires_at < now_ms
