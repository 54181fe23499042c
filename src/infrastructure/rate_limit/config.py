"""Rate limit rules configuration.

Default rule set, excluded paths and the pure helpers used by the rate
limit service: glob path matching, first-match rule lookup and counter key
construction.

Rule Order:
    Rules are matched in declaration order and the first match wins, so
    specific paths must be declared before the ``/api/**`` fallback.

Examples:
    >>> match_path("/api/blog/*", "/api/blog/123")
    True
    >>> match_path("/api/**", "/api")
    True
    >>> generate_key(RateLimitKeyStrategy.USER, "10.0.0.1", None, "/api/blog")
    'ip:10.0.0.1:/api/blog'
"""

from collections.abc import Iterable, Mapping

from src.domain.enums import RateLimitKeyStrategy
from src.domain.value_objects.rate_limit_rule import RateLimitRule

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

E2E_BYPASS_HEADER = "x-e2e-bypass"

DEFAULT_RATE_LIMIT_RULES: tuple[RateLimitRule, ...] = (
    # Brute-force protection for credentials
    RateLimitRule(
        path="/api/auth/login",
        window_ms=MINUTE_MS,
        max_requests=5,
        key_strategy=RateLimitKeyStrategy.IP,
    ),
    RateLimitRule(
        path="/api/auth/register",
        window_ms=HOUR_MS,
        max_requests=3,
        key_strategy=RateLimitKeyStrategy.IP,
    ),
    # Content writes, per author
    RateLimitRule(
        path="/api/blog",
        window_ms=MINUTE_MS,
        max_requests=10,
        key_strategy=RateLimitKeyStrategy.USER,
    ),
    # Fallback for everything else under /api
    RateLimitRule(
        path="/api/**",
        window_ms=MINUTE_MS,
        max_requests=100,
        key_strategy=RateLimitKeyStrategy.IP,
    ),
)

EXCLUDED_PATHS: tuple[str, ...] = (
    "/api/health",
    "/api/health/stream",
    "/api/traces/stream",
)


def match_path(pattern: str, path: str) -> bool:
    """Match a request path against a rule glob.

    Supported patterns:
        - exact: ``/api/blog`` matches only ``/api/blog``
        - one segment: ``/api/blog/*`` matches ``/api/blog/123`` but not
          ``/api/blog`` or ``/api/blog/1/2``
        - any depth: ``/api/**`` matches ``/api``, ``/api/a`` and ``/api/a/b``

    Args:
        pattern: Rule path pattern.
        path: Request path.

    Returns:
        bool: True if the path matches.
    """
    if pattern == path:
        return True

    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return path == prefix or path.startswith(prefix + "/")

    if pattern.endswith("/*"):
        prefix = pattern[:-2] + "/"
        if not path.startswith(prefix):
            return False
        remainder = path[len(prefix) :]
        return bool(remainder) and "/" not in remainder

    return False


def find_matching_rule(
    rules: Iterable[RateLimitRule], path: str
) -> RateLimitRule | None:
    """Return the first rule whose pattern matches ``path``, if any."""
    for rule in rules:
        if match_path(rule.path, path):
            return rule
    return None


def is_excluded_path(path: str, excluded: Iterable[str] = EXCLUDED_PATHS) -> bool:
    """Check if ``path`` equals or starts with an excluded path."""
    return any(path == prefix or path.startswith(prefix) for prefix in excluded)


def generate_key(
    strategy: RateLimitKeyStrategy,
    ip: str,
    user_id: int | str | None,
    rule_path: str,
) -> str:
    """Build the counter key for a request.

    Key Formats:
        ip:       ``ip:<ip>:<rule_path>``
        user:     ``user:<user_id>:<rule_path>``
        ip+user:  ``ip+user:<ip>:<user_id>:<rule_path>``

    Anonymous requests (``user_id is None``) under the user and ip+user
    strategies use the ip format.

    Args:
        strategy: Key strategy of the matched rule.
        ip: Client IP.
        user_id: Authenticated user id, if any.
        rule_path: Pattern of the matched rule (not the request path).

    Returns:
        str: Composite counter key.
    """
    if strategy is RateLimitKeyStrategy.USER and user_id is not None:
        return f"user:{user_id}:{rule_path}"
    if strategy is RateLimitKeyStrategy.IP_USER and user_id is not None:
        return f"ip+user:{ip}:{user_id}:{rule_path}"
    return f"ip:{ip}:{rule_path}"


def is_e2e_bypass(enabled: bool, headers: Mapping[str, str]) -> bool:
    """Check the end-to-end test escape hatch.

    Args:
        enabled: E2E_RATE_LIMIT_BYPASS setting.
        headers: Request headers (case-insensitive mapping).

    Returns:
        bool: True when the flag is on AND the bypass header is present.
    """
    return enabled and E2E_BYPASS_HEADER in headers
