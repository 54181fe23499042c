"""Rate limit key strategy enumeration.

Defines how the counter key for a rate limit rule is built from the
request identity. Each strategy produces an independent counter namespace.

Usage:
    from src.domain.enums import RateLimitKeyStrategy

    rule = RateLimitRule(
        path="/api/auth/login",
        window_ms=60_000,
        max_requests=5,
        key_strategy=RateLimitKeyStrategy.IP,
    )
"""

from enum import Enum


class RateLimitKeyStrategy(str, Enum):
    """Key strategies for rate limit rules.

    String Enum:
        Inherits from str for easy serialization. Values are the wire
        values accepted by the admin rules endpoint.

    Key Formats:
        IP: ip:{address}:{rule_path}
        USER: user:{user_id}:{rule_path}
        IP_USER: ip+user:{address}:{user_id}:{rule_path}

    Anonymous requests under USER and IP_USER fall back to the IP key.
    """

    IP = "ip"
    """Rate limit by client IP address.

    Use for unauthenticated endpoints where user identity is unknown
    (login, registration).
    """

    USER = "user"
    """Rate limit by authenticated user ID.

    Use for authenticated write endpoints. Anonymous callers are keyed
    by IP instead.
    """

    IP_USER = "ip+user"
    """Rate limit by the (IP, user) pair.

    A user hitting the endpoint from two addresses gets two counters.
    Anonymous callers are keyed by IP instead.
    """
