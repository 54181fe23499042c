"""Rate limit service.

Checks requests against an ordered rule set with sliding-window counters.

Architecture:
    - Application service; pure matching/key helpers live in
      src/infrastructure/rate_limit/config.py, counters in the repository
    - Rules are held as an immutable tuple that ``set_rules`` swaps in one
      assignment, so concurrent checks see either the old or the new set
    - Storage errors propagate (the request fails closed)

Usage:
    service = RateLimitService(repository=repo, logger=logger)
    result = await service.check_limit(ip="10.0.0.3", user_id=None,
                                       path="/api/auth/login", method="POST")
    if not result.allowed:
        ...
"""

from collections.abc import Iterable

from src.core.clock import Clock, to_epoch_ms, utc_now
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitExceededError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rate_limit_repository import RateLimitRepositoryProtocol
from src.domain.value_objects.rate_limit_rule import (
    RateLimitCheckResult,
    RateLimitRule,
)
from src.infrastructure.rate_limit.config import (
    DEFAULT_RATE_LIMIT_RULES,
    EXCLUDED_PATHS,
    find_matching_rule,
    generate_key,
    is_excluded_path,
)


class RateLimitService:
    """Sliding-window rate limiter.

    Dependencies (injected via constructor):
        - RateLimitRepositoryProtocol: atomic counter storage
        - LoggerProtocol: denial warnings and rule updates

    Args:
        repository: Counter storage.
        logger: Structured logger.
        rules: Initial rule set (first match wins).
        excluded_paths: Paths never rate limited.
        clock: Time source.
    """

    def __init__(
        self,
        *,
        repository: RateLimitRepositoryProtocol,
        logger: LoggerProtocol,
        rules: Iterable[RateLimitRule] = DEFAULT_RATE_LIMIT_RULES,
        excluded_paths: Iterable[str] = EXCLUDED_PATHS,
        clock: Clock = utc_now,
    ) -> None:
        self._repository = repository
        self._logger = logger
        self._rules: tuple[RateLimitRule, ...] = tuple(rules)
        self._excluded_paths = tuple(excluded_paths)
        self._clock = clock

    def get_rules(self) -> list[RateLimitRule]:
        """Return a copy of the active rule list."""
        return list(self._rules)

    def set_rules(self, rules: Iterable[RateLimitRule]) -> None:
        """Replace the rule list.

        Args:
            rules: New rules in match order.
        """
        snapshot = tuple(rules)
        self._rules = snapshot
        self._logger.info("Rate limit rules updated", rule_count=len(snapshot))

    async def check_limit(
        self,
        ip: str,
        user_id: int | str | None,
        path: str,
        method: str,
    ) -> RateLimitCheckResult:
        """Count the request and report whether it is within quota.

        Excluded and unmatched paths are allowed without touching storage.

        Args:
            ip: Client IP.
            user_id: Authenticated user id, if any.
            path: Request path.
            method: HTTP method (logged only; rules match on path).

        Returns:
            RateLimitCheckResult: Allow/deny decision and header values.
        """
        if is_excluded_path(path, self._excluded_paths):
            return RateLimitCheckResult.unrestricted()

        rule = find_matching_rule(self._rules, path)
        if rule is None:
            return RateLimitCheckResult.unrestricted()

        key = generate_key(rule.key_strategy, ip, user_id, rule.path)
        entry = await self._repository.increment_or_create(
            key, rule.window_ms, to_epoch_ms(self._clock())
        )

        allowed = entry.count <= rule.max_requests
        if not allowed:
            self._logger.warning(
                "Rate limit exceeded",
                key=key,
                count=entry.count,
                limit=rule.max_requests,
                path=path,
                method=method,
            )

        return RateLimitCheckResult(
            allowed=allowed,
            remaining=max(0, rule.max_requests - entry.count),
            limit=rule.max_requests,
            reset_at=entry.window_start + rule.window_ms,
            rule=rule,
        )

    async def enforce(
        self,
        ip: str,
        user_id: int | str | None,
        path: str,
        method: str,
    ) -> Result[RateLimitCheckResult, RateLimitExceededError]:
        """Check the request and turn a denial into a Failure.

        Returns:
            Success with the check result when allowed, otherwise Failure
            carrying ``retry_after`` seconds.
        """
        result = await self.check_limit(ip, user_id, path, method)
        if result.allowed or result.rule is None:
            return Success(value=result)

        return Failure(
            error=RateLimitExceededError(
                code=ErrorCode.RATE_LIMIT_EXCEEDED,
                message="Rate limit exceeded",
                retry_after=result.retry_after_seconds(to_epoch_ms(self._clock())),
                limit=result.rule.max_requests,
                reset_at=result.reset_at,
                details={"rule": result.rule.path},
            )
        )

    async def cleanup_expired_entries(self) -> int:
        """Delete expired counters.

        Returns:
            int: Number of counters deleted.
        """
        deleted = await self._repository.delete_expired(to_epoch_ms(self._clock()))
        if deleted > 0:
            self._logger.info("Cleaned up expired rate limit entries", deleted=deleted)
        return deleted
