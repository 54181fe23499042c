"""Unit tests for TraceMiddleware and RateLimitMiddleware.

Tests cover:
- Trace id parsing and client IP resolution helpers
- Which paths are traced
- X-Trace-Id propagation and trace recording (status, timing, user agent)
- Trace write failures never change the response
- Allowed requests get X-RateLimit-* headers when a rule matched
- Denied requests get a 429 problem response with Retry-After
- E2E bypass skips the rate limiter

Architecture:
- Minimal FastAPI app wired with both middlewares
- Services are AsyncMock doubles injected through the constructors
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from fastapi import APIRouter, Depends, FastAPI
from fastapi.testclient import TestClient

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.errors import RateLimitExceededError
from src.domain.value_objects import RateLimitCheckResult, RateLimitRule
from src.presentation.api.middleware.phase_timer import mark_handler_start
from src.presentation.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
    rate_limit_headers,
)
from src.presentation.api.middleware.trace_middleware import (
    TraceMiddleware,
    client_ip,
    get_trace_id,
    is_traced_path,
    parse_trace_id,
)

LOGIN_RULE = RateLimitRule(path="/api/auth/login", window_ms=60_000, max_requests=5)
RESET_AT_MS = 1_736_942_460_000


def _allowed(rule: RateLimitRule | None = LOGIN_RULE) -> Success:
    if rule is None:
        return Success(value=RateLimitCheckResult.unrestricted())
    return Success(
        value=RateLimitCheckResult(
            allowed=True, remaining=4, limit=5, reset_at=RESET_AT_MS, rule=rule
        )
    )


def _denied() -> Failure:
    return Failure(
        error=RateLimitExceededError(
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message="Rate limit exceeded",
            retry_after=42,
            limit=5,
            reset_at=RESET_AT_MS,
            details={"rule": "/api/auth/login"},
        )
    )


def _build_app(trace_service, rate_limit, logger, *, bypass_enabled=False) -> FastAPI:
    app = FastAPI()
    router = APIRouter(prefix="/api", dependencies=[Depends(mark_handler_start)])

    @router.get("/projects")
    async def list_projects() -> dict:
        return {"traceId": get_trace_id()}

    @router.get("/explode")
    async def explode() -> dict:
        raise RuntimeError("handler failed")

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "healthy"}

    app.include_router(router)
    app.add_middleware(
        RateLimitMiddleware, rate_limit=rate_limit, bypass_enabled=bypass_enabled
    )
    app.add_middleware(TraceMiddleware, trace_service=trace_service, logger=logger)
    return app


@pytest.fixture
def trace_service() -> MagicMock:
    service = MagicMock()
    service.record_trace = AsyncMock()
    return service


@pytest.fixture
def rate_limit() -> MagicMock:
    service = MagicMock()
    service.enforce = AsyncMock(return_value=_allowed())
    return service


@pytest.fixture
def client(trace_service, rate_limit, mock_logger) -> TestClient:
    app = _build_app(trace_service, rate_limit, mock_logger)
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Helpers
# =============================================================================


@pytest.mark.unit
class TestTraceHelpers:
    """Tests for trace id and client IP helpers."""

    def test_parse_trace_id_keeps_valid_uuid(self):
        raw = "12345678-1234-5678-1234-567812345678"

        assert parse_trace_id(raw) == UUID(raw)

    @pytest.mark.parametrize("raw", [None, "", "not-a-uuid"])
    def test_parse_trace_id_mints_new_uuid(self, raw):
        assert isinstance(parse_trace_id(raw), UUID)

    def test_client_ip_prefers_first_forwarded_for(self):
        request = SimpleNamespace(
            headers={"X-Forwarded-For": " 203.0.113.7 , 10.0.0.1"},
            client=SimpleNamespace(host="10.0.0.1"),
        )

        assert client_ip(request) == "203.0.113.7"

    def test_client_ip_falls_back_to_peer(self):
        request = SimpleNamespace(headers={}, client=SimpleNamespace(host="10.0.0.1"))

        assert client_ip(request) == "10.0.0.1"

    def test_client_ip_unknown_without_peer(self):
        request = SimpleNamespace(headers={}, client=None)

        assert client_ip(request) == "unknown"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/api/projects", True),
            ("/api/auth/login", True),
            ("/api/health", False),
            ("/api/traces/stream", False),
            ("/api/alerts/stream", False),
            ("/docs", False),
        ],
    )
    def test_is_traced_path(self, path, expected):
        assert is_traced_path(path) is expected

    def test_get_trace_id_outside_request_is_none(self):
        assert get_trace_id() is None


# =============================================================================
# TraceMiddleware
# =============================================================================


@pytest.mark.unit
class TestTraceMiddleware:
    """Tests for trace propagation and recording."""

    def test_uses_incoming_trace_id(self, client, trace_service):
        trace_id = "12345678-1234-5678-1234-567812345678"

        response = client.get("/api/projects", headers={"X-Trace-Id": trace_id})

        assert response.headers["X-Trace-Id"] == trace_id
        assert response.json() == {"traceId": trace_id}
        recorded = trace_service.record_trace.await_args.args[0]
        assert recorded.trace_id == UUID(trace_id)

    def test_records_request_details(self, client, trace_service):
        client.get(
            "/api/projects",
            headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "203.0.113.7"},
        )

        trace_service.record_trace.assert_awaited_once()
        recorded = trace_service.record_trace.await_args.args[0]
        assert recorded.method == "GET"
        assert recorded.path == "/api/projects"
        assert recorded.status_code == 200
        assert recorded.user_agent == "pytest-agent"
        assert recorded.ip == "203.0.113.7"
        assert recorded.user_id is None
        assert recorded.duration_ms >= 0
        assert recorded.timing.total == pytest.approx(recorded.duration_ms, abs=0.05)

    def test_unhandled_error_is_recorded_as_500(self, client, trace_service):
        response = client.get("/api/explode")

        assert response.status_code == 500
        recorded = trace_service.record_trace.await_args.args[0]
        assert recorded.status_code == 500

    def test_untraced_path_is_not_recorded(self, client, trace_service):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert "X-Trace-Id" not in response.headers
        trace_service.record_trace.assert_not_awaited()

    def test_trace_write_failure_keeps_response(
        self, client, trace_service, mock_logger
    ):
        trace_service.record_trace.side_effect = RuntimeError("database is locked")

        response = client.get("/api/projects")

        assert response.status_code == 200
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.args[0] == "Failed to record request trace"


# =============================================================================
# RateLimitMiddleware
# =============================================================================


@pytest.mark.unit
class TestRateLimitMiddleware:
    """Tests for rate limit enforcement at the HTTP edge."""

    def test_rate_limit_headers(self):
        headers = rate_limit_headers(_allowed().value)

        assert headers == {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "4",
            "X-RateLimit-Reset": "1736942460",
        }

    def test_allowed_request_gets_headers(self, client, rate_limit):
        response = client.get("/api/projects")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "4"
        assert response.headers["X-RateLimit-Reset"] == "1736942460"
        kwargs = rate_limit.enforce.await_args.kwargs
        assert kwargs["path"] == "/api/projects"
        assert kwargs["method"] == "GET"
        assert kwargs["user_id"] is None

    def test_unrestricted_request_has_no_headers(self, client, rate_limit):
        rate_limit.enforce.return_value = _allowed(rule=None)

        response = client.get("/api/projects")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    def test_denied_request_gets_problem_response(self, client, rate_limit, trace_service):
        rate_limit.enforce.return_value = _denied()

        response = client.get("/api/projects")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["X-RateLimit-Limit"] == "5"
        body = response.json()
        assert body["type"] == "/errors/rate-limit-exceeded"
        assert body["title"] == "Too Many Requests"
        assert body["status"] == 429
        assert body["statusCode"] == 429
        assert body["message"] == "Rate limit exceeded"
        assert body["retryAfter"] == 42
        assert body["detail"] == "Too many requests. Please try again in 42 seconds."
        assert body["instance"] == "/api/projects"
        assert body["traceId"] == response.headers["X-Trace-Id"]
        recorded = trace_service.record_trace.await_args.args[0]
        assert recorded.status_code == 429

    def test_denied_request_never_reaches_handler(self, client, rate_limit, trace_service):
        rate_limit.enforce.return_value = _denied()

        client.get("/api/projects")

        recorded = trace_service.record_trace.await_args.args[0]
        assert recorded.timing.handler == 0.0

    def test_e2e_bypass_skips_limiter(self, trace_service, rate_limit, mock_logger):
        app = _build_app(trace_service, rate_limit, mock_logger, bypass_enabled=True)
        client = TestClient(app)

        response = client.get("/api/projects", headers={"X-E2E-Bypass": "1"})

        assert response.status_code == 200
        rate_limit.enforce.assert_not_awaited()

    def test_bypass_header_ignored_when_disabled(self, client, rate_limit):
        client.get("/api/projects", headers={"X-E2E-Bypass": "1"})

        rate_limit.enforce.assert_awaited_once()
