"""API tests for rate limiting through the full application.

Tests cover:
- X-RateLimit-* headers on matched paths
- 429 problem details with Retry-After once the quota is spent
- Excluded paths carry no rate limit headers
- Rule listing and replacement (GET/PUT /api/rate-limit/rules)
- Rule replacement closed without a configured admin token, 401 without a valid one
- The end-to-end bypass header

Architecture:
- Real app (create_app), real SQLite counters in a temp file
- Default rules: /api/auth/login allows 5 requests per minute per IP
"""

import pytest

LOGIN = "/api/auth/login"
ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.mark.api
class TestLoginQuota:
    """Login brute-force rule (5/min by IP)."""

    def test_remaining_counts_down(self, client):
        remaining = []
        for _ in range(5):
            response = client.post(LOGIN)
            # No login route is mounted; the limiter runs before routing.
            assert response.status_code == 404
            assert response.headers["X-RateLimit-Limit"] == "5"
            remaining.append(response.headers["X-RateLimit-Remaining"])

        assert remaining == ["4", "3", "2", "1", "0"]

    def test_sixth_request_is_rejected(self, client):
        for _ in range(5):
            client.post(LOGIN)

        response = client.post(LOGIN)

        assert response.status_code == 429
        retry_after = int(response.headers["Retry-After"])
        assert 0 < retry_after <= 60
        assert response.headers["X-RateLimit-Remaining"] == "0"
        body = response.json()
        assert body["type"] == "/errors/rate-limit-exceeded"
        assert body["status"] == 429
        assert body["statusCode"] == 429
        assert body["message"] == "Rate limit exceeded"
        assert body["retryAfter"] == retry_after
        assert body["instance"] == LOGIN

    def test_clients_are_counted_separately(self, client):
        for _ in range(6):
            client.post(LOGIN, headers={"X-Forwarded-For": "198.51.100.1"})

        response = client.post(LOGIN, headers={"X-Forwarded-For": "198.51.100.2"})

        assert response.status_code == 404
        assert response.headers["X-RateLimit-Remaining"] == "4"


@pytest.mark.api
class TestUnlimitedPaths:
    """Excluded paths."""

    def test_health_has_no_rate_limit_headers(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers

    def test_paths_outside_api_are_not_limited(self, client):
        response = client.get("/openapi.json")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers


@pytest.mark.api
class TestRuleManagement:
    """GET/PUT /api/rate-limit/rules."""

    @pytest.fixture
    def admin_client(self, make_client, monkeypatch):
        monkeypatch.setenv("ADMIN_API_TOKEN", ADMIN_TOKEN)
        return make_client()

    def test_list_default_rules_in_match_order(self, client):
        response = client.get("/api/rate-limit/rules")

        assert response.status_code == 200
        rules = response.json()
        assert rules[0] == {
            "path": "/api/auth/login",
            "windowMs": 60000,
            "maxRequests": 5,
            "keyStrategy": "ip",
        }
        assert rules[-1]["path"] == "/api/**"

    def test_replace_rules(self, admin_client):
        new_rules = [
            {"path": "/api/auth/login", "windowMs": 60000, "maxRequests": 1},
            {"path": "/api/**", "windowMs": 60000, "maxRequests": 50},
        ]

        response = admin_client.put(
            "/api/rate-limit/rules", json=new_rules, headers=ADMIN_HEADERS
        )

        assert response.status_code == 200
        assert [rule["maxRequests"] for rule in response.json()] == [1, 50]
        assert admin_client.post(LOGIN).status_code == 404
        assert admin_client.post(LOGIN).status_code == 429

    def test_invalid_rule_returns_problem_details(self, admin_client):
        response = admin_client.put(
            "/api/rate-limit/rules",
            json=[{"path": "/api/blog", "windowMs": 0, "maxRequests": 10}],
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "/errors/validation-failed"
        assert [error["field"] for error in body["errors"]] == ["0.windowMs"]
        # Rejected input leaves the active rules untouched
        rules = admin_client.get("/api/rate-limit/rules").json()
        assert rules[0]["path"] == "/api/auth/login"


@pytest.mark.api
class TestRuleManagementAuth:
    """Rule replacement requires the admin bearer token."""

    def _assert_login_still_limited(self, client):
        for _ in range(5):
            client.post(LOGIN)
        assert client.post(LOGIN).status_code == 429

    def test_closed_when_no_admin_token_configured(self, client):
        response = client.put(
            "/api/rate-limit/rules", json=[], headers=ADMIN_HEADERS
        )

        assert response.status_code == 403
        assert response.json()["type"] == "/errors/forbidden"
        self._assert_login_still_limited(client)

    def test_missing_token_rejected(self, make_client, monkeypatch):
        monkeypatch.setenv("ADMIN_API_TOKEN", ADMIN_TOKEN)
        client = make_client()

        response = client.put("/api/rate-limit/rules", json=[])

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["type"] == "/errors/unauthorized"
        self._assert_login_still_limited(client)

    def test_wrong_token_rejected(self, make_client, monkeypatch):
        monkeypatch.setenv("ADMIN_API_TOKEN", ADMIN_TOKEN)
        client = make_client()

        response = client.put(
            "/api/rate-limit/rules",
            json=[],
            headers={"Authorization": "Bearer not-the-token"},
        )

        assert response.status_code == 401
        rules = client.get("/api/rate-limit/rules").json()
        assert rules[0]["path"] == "/api/auth/login"
        self._assert_login_still_limited(client)


@pytest.mark.api
class TestE2EBypass:
    """x-e2e-bypass header."""

    def test_bypass_header_skips_limits_when_enabled(self, make_client, monkeypatch):
        monkeypatch.setenv("E2E_RATE_LIMIT_BYPASS", "true")
        client = make_client()

        responses = [
            client.post(LOGIN, headers={"X-E2E-Bypass": "1"}) for _ in range(7)
        ]

        assert {r.status_code for r in responses} == {404}
        assert "X-RateLimit-Limit" not in responses[-1].headers

    def test_bypass_header_ignored_when_disabled(self, client):
        for _ in range(5):
            client.post(LOGIN, headers={"X-E2E-Bypass": "1"})

        assert client.post(LOGIN, headers={"X-E2E-Bypass": "1"}).status_code == 429
