"""Rate limit rule value objects.

Immutable configuration for a single sliding-window rate limit rule, plus
the result of checking a request against the rule set.

Usage:
    from src.domain.value_objects import RateLimitRule
    from src.domain.enums import RateLimitKeyStrategy

    rule = RateLimitRule(
        path="/api/auth/login",
        window_ms=60_000,
        max_requests=5,
        key_strategy=RateLimitKeyStrategy.IP,
    )
"""

import math
from dataclasses import dataclass

from src.domain.enums.rate_limit_key_strategy import RateLimitKeyStrategy


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitRule:
    """Rate limit rule configuration (value object).

    Sliding Window Algorithm:
        - The first request for a key opens a window at ``now``
        - Each request inside the window increments the counter
        - The first request at or after ``window_start + window_ms`` resets
          the counter to 1 and opens a new window
        - A request is allowed while ``count <= max_requests``

    Attributes:
        path: Glob pattern the request path is matched against.
            Exact (``/api/blog``), one segment (``/api/blog/*``) or any
            depth including zero (``/api/**``).
        window_ms: Window length in milliseconds.
        max_requests: Requests allowed per window.
        key_strategy: How the counter key is built (ip, user, ip+user).

    Raises:
        ValueError: If path does not start with "/" or a numeric field is
            not positive.
    """

    path: str
    window_ms: int
    max_requests: int
    key_strategy: RateLimitKeyStrategy = RateLimitKeyStrategy.IP

    def __post_init__(self) -> None:
        """Validate rule configuration after initialization.

        Raises:
            ValueError: If any field is invalid.
        """
        if not self.path.startswith("/"):
            raise ValueError(f"path must start with '/', got {self.path!r}")
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")
        if self.max_requests <= 0:
            raise ValueError(
                f"max_requests must be positive, got {self.max_requests}"
            )


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitCheckResult:
    """Result of checking one request against the rule set.

    Attributes:
        allowed: Whether the request may proceed.
        remaining: Requests left in the current window
            (``math.inf`` when no rule applies).
        limit: ``max_requests`` of the matched rule
            (``math.inf`` when no rule applies).
        reset_at: Epoch milliseconds when the current window ends
            (0 when no rule applies).
        rule: The matched rule, or None for excluded/unmatched paths.
    """

    allowed: bool
    remaining: float
    limit: float
    reset_at: int
    rule: RateLimitRule | None = None

    @classmethod
    def unrestricted(cls) -> "RateLimitCheckResult":
        """Result for a path no rule applies to."""
        return cls(
            allowed=True,
            remaining=math.inf,
            limit=math.inf,
            reset_at=0,
            rule=None,
        )

    def retry_after_seconds(self, now_ms: int) -> int:
        """Whole seconds until the window resets, rounded up.

        Args:
            now_ms: Current time in epoch milliseconds.

        Returns:
            int: Seconds until ``reset_at`` (never negative).
        """
        return max(0, math.ceil((self.reset_at - now_ms) / 1000))
