"""Shared pytest fixtures.

- ``clock``: controllable UTC time source injected into services
- ``mock_logger``: MagicMock standing in for LoggerProtocol
- ``database``: fresh SQLite file per test with all tables created
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from src.infrastructure.persistence.database import Database

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest_asyncio.fixture
async def database(tmp_path):
    """Database bound to a throwaway SQLite file."""
    db = Database(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite'}")
    await db.create_all()
    yield db
    await db.close()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real database"
    )
    config.addinivalue_line("markers", "api: API tests through the full app")
