"""RateLimitRepository - SQLAlchemy implementation of the counter store.

Adapter for hexagonal architecture. The increment is one
``INSERT ... ON CONFLICT (key) DO UPDATE ... RETURNING`` statement whose
SET clause does the window arithmetic inside the database, so concurrent
requests for the same key are serialized by the row lock instead of a
read-then-write in Python.
"""

from typing import Any, cast

from sqlalchemy import case, delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from src.domain.entities.rate_limit_entry import RateLimitEntry
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.rate_limit_entry import RateLimitEntryModel

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class RateLimitRepository:
    """SQLAlchemy implementation of RateLimitRepositoryProtocol.

    Opens one session per call; storage errors propagate.

    Example:
        >>> repo = RateLimitRepository(database)
        >>> entry = await repo.increment_or_create("ip:1.2.3.4:/api/**", 60_000, now_ms)
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing sessions.

        Raises:
            ValueError: If the backend has no native upsert support.
        """
        if database.dialect_name not in _UPSERT_INSERTS:
            raise ValueError(
                f"Rate limit storage requires sqlite or postgresql, "
                f"got {database.dialect_name}"
            )
        self._database = database
        self._insert = _UPSERT_INSERTS[database.dialect_name]

    async def increment_or_create(
        self, key: str, window_ms: int, now_ms: int
    ) -> RateLimitEntry:
        """Atomically count one request for ``key``.

        ``expires_at`` is ``window_start + 2 * window_ms``; it only moves when
        the entry is created or its window resets.

        Args:
            key: Composite counter key.
            window_ms: Rule window length.
            now_ms: Current time in epoch milliseconds.

        Returns:
            RateLimitEntry: Entry state after this request was counted.
        """
        expires_at = now_ms + 2 * window_ms
        insert_stmt = self._insert(RateLimitEntryModel).values(
            key=key,
            count=1,
            window_start=now_ms,
            expires_at=expires_at,
        )
        window_elapsed = RateLimitEntryModel.window_start + window_ms <= now_ms
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=[RateLimitEntryModel.key],
            set_={
                "count": case(
                    (window_elapsed, 1),
                    else_=RateLimitEntryModel.count + 1,
                ),
                "window_start": case(
                    (window_elapsed, now_ms),
                    else_=RateLimitEntryModel.window_start,
                ),
                "expires_at": case(
                    (window_elapsed, expires_at),
                    else_=RateLimitEntryModel.expires_at,
                ),
            },
        ).returning(
            RateLimitEntryModel.count,
            RateLimitEntryModel.window_start,
            RateLimitEntryModel.expires_at,
        )

        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            count, window_start, stored_expires_at = result.one()

        return RateLimitEntry(
            key=key,
            count=count,
            window_start=window_start,
            expires_at=stored_expires_at,
        )

    async def delete_expired(self, now_ms: int) -> int:
        """Delete entries whose ``expires_at`` has passed.

        Args:
            now_ms: Current time in epoch milliseconds.

        Returns:
            Number of entries deleted.
        """
        stmt = delete(RateLimitEntryModel).where(
            RateLimitEntryModel.expires_at < now_ms
        )
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
        return cast(Any, result).rowcount or 0

    async def find_by_key(self, key: str) -> RateLimitEntry | None:
        """Find a counter by key.

        Returns:
            RateLimitEntry if found, None otherwise.
        """
        async with self._database.get_session() as session:
            model = await session.get(RateLimitEntryModel, key)
            if model is None:
                return None
            return self._to_entity(model)

    async def find_all(self) -> list[RateLimitEntry]:
        """List all counters ordered by key."""
        stmt = select(RateLimitEntryModel).order_by(RateLimitEntryModel.key)
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: RateLimitEntryModel) -> RateLimitEntry:
        return RateLimitEntry(
            key=model.key,
            count=model.count,
            window_start=model.window_start,
            expires_at=model.expires_at,
        )
