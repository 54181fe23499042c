"""Rate limit middleware for FastAPI.

This middleware intercepts all HTTP requests and applies the sliding-window
rate limit rules. It handles:
- IP-scoped and user-scoped counters (user id from ``request.state.user_id``)
- The end-to-end test bypass header
- HTTP 429 responses with Retry-After and X-RateLimit-* headers

Storage errors are not swallowed: the request fails closed with a 500.

Usage:
    # In main.py
    from src.presentation.api.middleware.rate_limit_middleware import (
        RateLimitMiddleware,
    )

    app.add_middleware(RateLimitMiddleware)
"""

import math
from typing import TYPE_CHECKING, Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from src.core.result import Failure, Success
from src.domain.value_objects.rate_limit_rule import RateLimitCheckResult
from src.infrastructure.rate_limit.config import is_e2e_bypass
from src.presentation.api.middleware.phase_timer import (
    GUARD_END,
    GUARD_START,
    HANDLER_END,
    mark_phase,
)
from src.presentation.api.middleware.trace_middleware import client_ip
from src.presentation.routers.api.errors.problem_details import (
    RateLimitProblem,
    problem_type,
)

if TYPE_CHECKING:
    from src.application.services import RateLimitService
    from src.domain.errors import RateLimitExceededError


def rate_limit_headers(result: RateLimitCheckResult) -> dict[str, str]:
    """X-RateLimit-* headers; X-RateLimit-Reset is in epoch seconds."""
    return {
        "X-RateLimit-Limit": str(int(result.limit)),
        "X-RateLimit-Remaining": str(int(result.remaining)),
        "X-RateLimit-Reset": str(math.ceil(result.reset_at / 1000)),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Starlette middleware for rate limiting HTTP requests.

    Response Headers:
        - Retry-After: Seconds until retry allowed (on 429)
        - X-RateLimit-Limit: Max requests per window
        - X-RateLimit-Remaining: Requests left in the window
        - X-RateLimit-Reset: Window reset time (epoch seconds)

    Headers are only set when a rule matched the request.

    Attributes:
        _rate_limit: RateLimitService (lazy loaded from container).
        _bypass_enabled: E2E bypass flag (lazy loaded from settings).
    """

    def __init__(
        self,
        app: ASGIApp,
        rate_limit: "RateLimitService | None" = None,
        bypass_enabled: bool | None = None,
    ) -> None:
        """Initialize rate limit middleware.

        Args:
            app: The ASGI application to wrap.
            rate_limit: Service override (defaults to the container's).
            bypass_enabled: Bypass flag override (defaults to settings).
        """
        super().__init__(app)
        self._rate_limit = rate_limit
        self._bypass_enabled = bypass_enabled

    def _get_rate_limit(self) -> "RateLimitService":
        if self._rate_limit is None:
            from src.core.container import get_rate_limit_service

            self._rate_limit = get_rate_limit_service()
        return self._rate_limit

    def _is_bypass_enabled(self) -> bool:
        if self._bypass_enabled is None:
            from src.core.config import get_settings

            self._bypass_enabled = get_settings().e2e_rate_limit_bypass
        return self._bypass_enabled

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Intercept request and apply rate limit.

        Args:
            request: Incoming HTTP request.
            call_next: Next handler in middleware chain.

        Returns:
            Response: Either rate limit error (429) or downstream response.
        """
        mark_phase(request, GUARD_START)

        if is_e2e_bypass(self._is_bypass_enabled(), request.headers):
            mark_phase(request, GUARD_END)
            return await self._call_handler(request, call_next)

        result = await self._get_rate_limit().enforce(
            ip=client_ip(request),
            user_id=getattr(request.state, "user_id", None),
            path=request.url.path,
            method=request.method,
        )
        mark_phase(request, GUARD_END)

        match result:
            case Failure(error=error):
                return self._build_429_response(request, error)
            case Success(value=check):
                response = await self._call_handler(request, call_next)
                if check.rule is not None:
                    response.headers.update(rate_limit_headers(check))
                return response

    async def _call_handler(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        mark_phase(request, HANDLER_END)
        return response

    def _build_429_response(
        self, request: Request, error: "RateLimitExceededError"
    ) -> JSONResponse:
        """Build HTTP 429 rate limit response.

        Returns RFC 7807 problem details plus the statusCode/message/retryAfter
        members.
        """
        problem = RateLimitProblem(
            type=problem_type("rate-limit-exceeded"),
            title="Too Many Requests",
            status=429,
            detail=(
                f"Too many requests. Please try again in {error.retry_after} seconds."
            ),
            instance=request.url.path,
            trace_id=getattr(request.state, "trace_id", None),
            retry_after=error.retry_after,
        )

        return JSONResponse(
            status_code=429,
            content=problem.to_content(),
            headers={
                "Retry-After": str(error.retry_after),
                "X-RateLimit-Limit": str(error.limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(math.ceil(error.reset_at / 1000)),
            },
        )
