"""Rate limit configuration and helpers.

Exports:
    DEFAULT_RATE_LIMIT_RULES: Default rule set (first match wins).
    EXCLUDED_PATHS: Paths never rate limited.
    match_path, find_matching_rule, is_excluded_path, generate_key,
    is_e2e_bypass: Pure helpers used by RateLimitService and middleware.
"""

from src.infrastructure.rate_limit.config import (
    DEFAULT_RATE_LIMIT_RULES,
    E2E_BYPASS_HEADER,
    EXCLUDED_PATHS,
    find_matching_rule,
    generate_key,
    is_e2e_bypass,
    is_excluded_path,
    match_path,
)

__all__ = [
    "DEFAULT_RATE_LIMIT_RULES",
    "E2E_BYPASS_HEADER",
    "EXCLUDED_PATHS",
    "find_matching_rule",
    "generate_key",
    "is_e2e_bypass",
    "is_excluded_path",
    "match_path",
]
