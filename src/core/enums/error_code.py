"""Machine-readable codes carried by DomainError.

Codes follow the ENTITY_ACTION_REASON convention. Infrastructure failures
are exceptions and have no code here.
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Business rule violations
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
