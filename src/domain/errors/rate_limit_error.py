"""Rate limit error types.

Returned (not raised) when a request exceeds its quota. This is the only
end-user-visible failure of the observability core.

Usage:
    from src.domain.errors import RateLimitExceededError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=RateLimitExceededError(
        code=ErrorCode.RATE_LIMIT_EXCEEDED,
        message="Rate limit exceeded",
        retry_after=42,
        limit=5,
        reset_at=1_700_000_060_000,
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitExceededError(DomainError):
    """Request denied because its window quota is exhausted.

    Storage failures during a check are NOT represented by this type;
    they propagate as exceptions so the request fails closed.

    Attributes:
        code: ErrorCode.RATE_LIMIT_EXCEEDED.
        message: Human-readable message.
        retry_after: Seconds until the window resets (Retry-After header).
        limit: max_requests of the matched rule.
        reset_at: Epoch milliseconds when the window resets.
        details: Additional context (key, rule path).
    """

    retry_after: int
    limit: int
    reset_at: int
