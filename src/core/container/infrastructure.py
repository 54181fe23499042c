"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Database (SQLite by default, PostgreSQL optional)
- Logging (structlog console/JSON)
- Error tracking (Sentry)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings

if TYPE_CHECKING:
    from src.domain.protocols.error_tracker_protocol import ErrorTrackerProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.infrastructure.persistence.database import Database


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_database() -> "Database":
    """Get database manager singleton (app-scoped).

    Returns:
        Database instance bound to DATABASE_URL.

    Usage:
        database = get_database()
        await database.create_all()
    """
    from src.infrastructure.persistence.database import Database

    settings = get_settings()
    return Database(database_url=settings.database_url, echo=settings.db_echo)


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection:
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_error_tracker() -> "ErrorTrackerProtocol":
    """Get error tracker singleton (app-scoped).

    Sentry is initialized only when SENTRY_DSN is set; otherwise the adapter
    reports ``is_enabled() == False`` and drops messages.

    Returns:
        Error tracker implementing ErrorTrackerProtocol.
    """
    from src.infrastructure.error_tracking.sentry_adapter import SentryAdapter

    settings = get_settings()
    return SentryAdapter(
        dsn=settings.sentry_dsn,
        environment=settings.environment.value,
        release=settings.app_version,
        logger=get_logger(),
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )
