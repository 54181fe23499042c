"""Domain errors package.

Usage:
    from src.domain.errors import RateLimitExceededError
"""

from src.domain.errors.rate_limit_error import RateLimitExceededError

__all__ = ["RateLimitExceededError"]
