"""Result types for railway-oriented programming.

Operations that can fail for an expected, business-level reason return a
Result instead of raising. Infrastructure failures (database errors, I/O
errors) are still raised and propagate to the caller.

Usage:
    result = await rate_limit_service.enforce(ip, user_id, path, method)
    match result:
        case Success(value=check):
            remaining = check.remaining
        case Failure(error=error):
            retry_after = error.retry_after
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
