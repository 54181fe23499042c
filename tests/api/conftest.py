"""API test fixtures.

Each test gets a fresh application: environment pointed at a throwaway
SQLite file, settings and container caches cleared, lifespan run through
TestClient.
"""

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from src.core.config import get_settings
from src.core.container import clear_container_cache


def _reset_caches() -> None:
    get_settings.cache_clear()
    clear_container_cache()


@pytest.fixture
def app_env(tmp_path, monkeypatch) -> None:
    """Isolated settings: temp database, no scheduler, no Sentry or SMTP."""
    db_file = tmp_path / "api.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    monkeypatch.setenv("DATABASE_PATH", str(db_file))
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("SENTRY_DSN", "")
    monkeypatch.setenv("SMTP_HOST", "")
    monkeypatch.setenv("E2E_RATE_LIMIT_BYPASS", "false")
    monkeypatch.setenv("ADMIN_API_TOKEN", "")


@pytest.fixture
def make_client(app_env) -> Iterator[Callable[[], TestClient]]:
    """Factory for a started TestClient; tweak env with monkeypatch first."""
    from src.main import create_app

    stack: list[TestClient] = []

    def _make() -> TestClient:
        _reset_caches()
        client = TestClient(create_app())
        client.__enter__()
        stack.append(client)
        return client

    yield _make

    for client in reversed(stack):
        client.__exit__(None, None, None)
    _reset_caches()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
