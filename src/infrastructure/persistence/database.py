"""Database connection and session management.

This module provides database connection management using SQLAlchemy's
async engine and session handling. Repositories open one short-lived
session per operation so request handlers and scheduled jobs never share
a session or hold long transactions.

Following hexagonal architecture:
- This is an infrastructure concern
- Provides database sessions to repository implementations
- Handles transaction boundaries and connection pooling
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


class Database:
    """Database connection and session management.

    Supports PostgreSQL (asyncpg) and SQLite (aiosqlite). SQLite files are
    opened in WAL mode with a busy timeout so readers never block the
    per-request counter upserts.

    Usage:
        db = Database("sqlite+aiosqlite:///./data/database.sqlite")
        async with db.get_session() as session:
            # Automatically commits on success, rolls back on error
            ...
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
    ) -> None:
        """Initialize database with connection parameters.

        Args:
            database_url: Async SQLAlchemy URL.
            echo: If True, log all SQL statements.
            pool_size: Connections kept in the pool (PostgreSQL only).
            max_overflow: Overflow connections above pool_size (PostgreSQL only).
        """
        self.url = make_url(database_url)
        engine_kwargs: dict[str, Any] = {"echo": echo}

        if self.is_sqlite:
            engine_kwargs["connect_args"] = {"timeout": 30}
        else:
            engine_kwargs.update(
                pool_pre_ping=True,  # Verify connections before use
                pool_size=pool_size,
                max_overflow=max_overflow,
                connect_args={"command_timeout": 60, "timeout": 30},
            )

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)

        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragmas)

        # Create session factory
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
        )

    @property
    def dialect_name(self) -> str:
        """Backend name ("sqlite", "postgresql")."""
        return self.url.get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.dialect_name == "sqlite"

    @property
    def sqlite_file(self) -> Path | None:
        """Path of the SQLite database file, or None for memory/other backends."""
        if not self.is_sqlite or not self.url.database:
            return None
        if self.url.database == ":memory:":
            return None
        return Path(self.url.database)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional database session.

        This is a context manager that:
        - Creates a new session
        - Commits on successful exit
        - Rolls back on exception
        - Always closes the session

        Yields:
            AsyncSession: Database session for operations
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create all tables defined in the models.

        Creates the parent directory of a SQLite file first.
        """
        from src.infrastructure.persistence import models  # noqa: F401
        from src.infrastructure.persistence.base import BaseModel

        sqlite_file = self.sqlite_file
        if sqlite_file is not None:
            sqlite_file.parent.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables defined in the models.

        Warning: This will delete all data! Only use for testing.
        """
        from src.infrastructure.persistence import models  # noqa: F401
        from src.infrastructure.persistence.base import BaseModel

        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)

    async def close(self) -> None:
        """Close all database connections.

        Should be called when shutting down the application.
        """
        await self.engine.dispose()

    async def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
                return True
        except Exception:
            return False


def _set_sqlite_pragmas(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()
