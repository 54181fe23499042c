"""Trace middleware: request correlation and trace recording.

- Accepts an incoming X-Trace-Id (UUID) or generates one
- Adds X-Trace-Id response header
- Exposes get_trace_id() helper for logging calls outside request handlers
- Measures phase timings and records one trace per /api request
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Awaitable, Callable
from uuid import UUID, uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.domain.value_objects.trace_values import TraceInput
from src.presentation.api.middleware.phase_timer import END, PhaseTimer

if TYPE_CHECKING:
    from src.application.services import TraceService
    from src.domain.protocols.logger_protocol import LoggerProtocol

TRACE_ID_HEADER = "X-Trace-Id"
TRACED_PREFIX = "/api/"
UNTRACED_PATHS = frozenset({"/api/health", "/api/traces/stream", "/api/alerts/stream"})

trace_id_context: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    """Return the current trace ID.

    Returns None when called outside of request context.
    Use this in logging calls to automatically include trace_id.

    Returns:
        str | None: The current request trace ID, or None if no active request.
    """
    return trace_id_context.get()


def parse_trace_id(raw: str | None) -> UUID:
    """Use the caller's trace id when it is a UUID, otherwise mint one."""
    if raw:
        try:
            return UUID(raw)
        except ValueError:
            pass
    return uuid4()


def client_ip(request: Request) -> str:
    """Client IP: first X-Forwarded-For entry, then the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    if request.client:
        return request.client.host
    return "unknown"


def is_traced_path(path: str) -> bool:
    return path.startswith(TRACED_PREFIX) and path not in UNTRACED_PATHS


class TraceMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that correlates and records each API request.

    Trace recording happens after the downstream response is produced. A
    failed write is logged and never changes the response.
    """

    def __init__(
        self,
        app: ASGIApp,
        trace_service: TraceService | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        super().__init__(app)
        self._trace_service = trace_service
        self._logger = logger

    def _get_trace_service(self) -> TraceService:
        if self._trace_service is None:
            from src.core.container import get_trace_service

            self._trace_service = get_trace_service()
        return self._trace_service

    def _get_logger(self) -> LoggerProtocol:
        if self._logger is None:
            from src.core.container import get_logger

            self._logger = get_logger()
        return self._logger

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Intercept a request to set and propagate a trace ID.

        Args:
            request: Incoming HTTP request.
            call_next: Next handler in middleware chain.

        Returns:
            Response: Downstream response with X-Trace-Id header.
        """
        path = request.url.path
        if not is_traced_path(path):
            return await call_next(request)

        trace_id = parse_trace_id(request.headers.get(TRACE_ID_HEADER))
        timer = PhaseTimer()
        request.state.trace_id = str(trace_id)
        request.state.phase_timer = timer
        token = trace_id_context.set(str(trace_id))

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[TRACE_ID_HEADER] = str(trace_id)
            return response
        finally:
            timer.mark(END)
            await self._record(request, trace_id, status_code, timer)
            trace_id_context.reset(token)

    async def _record(
        self, request: Request, trace_id: UUID, status_code: int, timer: PhaseTimer
    ) -> None:
        user_id = getattr(request.state, "user_id", None)
        try:
            await self._get_trace_service().record_trace(
                TraceInput(
                    trace_id=trace_id,
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round(timer.elapsed_ms(), 2),
                    timing=timer.timing(),
                    user_id=user_id if isinstance(user_id, int) else None,
                    user_agent=request.headers.get("user-agent", "unknown"),
                    ip=client_ip(request),
                )
            )
        except Exception as e:
            self._get_logger().error(
                "Failed to record request trace",
                error=e,
                trace_id=str(trace_id),
                path=request.url.path,
            )
