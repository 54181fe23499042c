"""TraceRepository - SQLAlchemy implementation of TraceRepositoryProtocol.

Adapter for hexagonal architecture. Maps between RequestTrace entities and
RequestTraceModel rows, and computes aggregate statistics.

Overall and per-endpoint statistics are computed in SQL. Hourly statistics
need a percentile, so matching rows are loaded and bucketed in Python.
"""

import math
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import case, delete, func, select

from src.domain.entities.request_trace import RequestTrace
from src.domain.value_objects.trace_values import (
    EndpointStats,
    HourlyStats,
    PhaseTiming,
    TraceFilters,
    TraceStats,
)
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.request_trace import RequestTraceModel

_ERROR_COUNT = func.sum(case((RequestTraceModel.status_code >= 400, 1), else_=0))


def percentile_95(durations: list[float]) -> float:
    """95th percentile by nearest rank.

    Sorts ascending and takes index ``ceil(0.95 * n) - 1`` clamped to 0.

    Args:
        durations: Sample values (any order).

    Returns:
        float: The percentile, or 0.0 for an empty sample.
    """
    if not durations:
        return 0.0
    ordered = sorted(durations)
    index = max(0, math.ceil(0.95 * len(ordered)) - 1)
    return ordered[index]


def error_rate(error_count: int, total: int) -> float:
    """Percentage of error responses; 0 when there are no requests."""
    if total <= 0:
        return 0.0
    return error_count * 100 / total


def bucket_by_hour(
    rows: Iterable[tuple[datetime, float, int]],
) -> list[HourlyStats]:
    """Group (timestamp, duration_ms, status_code) rows into hourly stats.

    Hours without rows are not emitted. Output is sorted oldest first.
    """
    buckets: dict[datetime, list[tuple[float, int]]] = defaultdict(list)
    for timestamp, duration_ms, status_code in rows:
        hour = timestamp.replace(minute=0, second=0, microsecond=0)
        buckets[hour].append((duration_ms, status_code))

    stats: list[HourlyStats] = []
    for hour in sorted(buckets):
        samples = buckets[hour]
        durations = [duration for duration, _ in samples]
        errors = sum(1 for _, status in samples if status >= 400)
        stats.append(
            HourlyStats(
                hour=hour,
                count=len(samples),
                avg_duration=sum(durations) / len(samples),
                error_rate=error_rate(errors, len(samples)),
                p95_duration=percentile_95(durations),
            )
        )
    return stats


class TraceRepository:
    """SQLAlchemy implementation of TraceRepositoryProtocol.

    This class does NOT inherit from the protocol (structural typing).

    Example:
        >>> repo = TraceRepository(database)
        >>> stats = await repo.get_stats()
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing sessions.
        """
        self._database = database

    async def save(self, trace: RequestTrace) -> RequestTrace:
        """Insert a trace.

        Args:
            trace: Trace to persist.

        Returns:
            The persisted trace.
        """
        async with self._database.get_session() as session:
            session.add(self._to_model(trace))
        return trace

    async def find_by_id(self, trace_id: UUID) -> RequestTrace | None:
        """Find trace by id.

        Returns:
            RequestTrace if found, None otherwise.
        """
        async with self._database.get_session() as session:
            model = await session.get(RequestTraceModel, trace_id)
            if model is None:
                return None
            return self._to_entity(model)

    async def find_recent(self, filters: TraceFilters) -> list[RequestTrace]:
        """List traces matching all given filters, newest first.

        Args:
            filters: Method (exact), path (substring), status (exact),
                inclusive duration range and pagination.

        Returns:
            Page of traces ordered by timestamp descending.
        """
        stmt = select(RequestTraceModel)

        if filters.method is not None:
            stmt = stmt.where(RequestTraceModel.method == filters.method)
        if filters.path is not None:
            stmt = stmt.where(
                RequestTraceModel.path.contains(filters.path, autoescape=True)
            )
        if filters.status_code is not None:
            stmt = stmt.where(RequestTraceModel.status_code == filters.status_code)
        if filters.min_duration is not None:
            stmt = stmt.where(RequestTraceModel.duration_ms >= filters.min_duration)
        if filters.max_duration is not None:
            stmt = stmt.where(RequestTraceModel.duration_ms <= filters.max_duration)

        stmt = (
            stmt.order_by(RequestTraceModel.timestamp.desc())
            .offset(filters.offset)
            .limit(filters.limit)
        )

        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars().all()]

    async def count(self) -> int:
        """Count retained traces."""
        stmt = select(func.count()).select_from(RequestTraceModel)
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def get_stats(self) -> TraceStats:
        """Overall statistics; all zero when the table is empty."""
        stmt = select(
            func.count(RequestTraceModel.trace_id),
            func.avg(RequestTraceModel.duration_ms),
            _ERROR_COUNT,
        )
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            total, avg_duration, errors = result.one()

        total = total or 0
        if total == 0:
            return TraceStats.empty()
        return TraceStats(
            total_count=total,
            avg_duration=float(avg_duration or 0.0),
            error_rate=error_rate(errors or 0, total),
        )

    async def get_hourly_stats(self, since: datetime) -> list[HourlyStats]:
        """Per-hour statistics for traces recorded at or after ``since``."""
        stmt = select(
            RequestTraceModel.timestamp,
            RequestTraceModel.duration_ms,
            RequestTraceModel.status_code,
        ).where(RequestTraceModel.timestamp >= since)

        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            rows = [tuple(row) for row in result.all()]

        return bucket_by_hour(cast(list[tuple[datetime, float, int]], rows))

    async def get_endpoint_stats(self, limit: int) -> list[EndpointStats]:
        """Statistics per (path, method), ordered by request count descending."""
        request_count = func.count(RequestTraceModel.trace_id).label("request_count")
        stmt = (
            select(
                RequestTraceModel.path,
                RequestTraceModel.method,
                request_count,
                func.avg(RequestTraceModel.duration_ms),
                _ERROR_COUNT,
            )
            .group_by(RequestTraceModel.path, RequestTraceModel.method)
            .order_by(request_count.desc(), RequestTraceModel.path)
            .limit(limit)
        )

        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            rows = result.all()

        return [
            EndpointStats(
                path=path,
                method=method,
                count=total,
                avg_duration=float(avg_duration or 0.0),
                error_rate=error_rate(errors or 0, total),
            )
            for path, method, total, avg_duration, errors in rows
        ]

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete traces recorded before ``cutoff``.

        Returns:
            Number of traces deleted.
        """
        stmt = delete(RequestTraceModel).where(RequestTraceModel.timestamp < cutoff)
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
        return cast(Any, result).rowcount or 0

    def _to_model(self, trace: RequestTrace) -> RequestTraceModel:
        return RequestTraceModel(
            trace_id=trace.trace_id,
            method=trace.method,
            path=trace.path,
            status_code=trace.status_code,
            duration_ms=trace.duration_ms,
            timing=trace.timing.to_dict(),
            user_id=trace.user_id,
            user_agent=trace.user_agent,
            ip=trace.ip,
            timestamp=trace.timestamp,
        )

    def _to_entity(self, model: RequestTraceModel) -> RequestTrace:
        return RequestTrace(
            trace_id=model.trace_id,
            method=model.method,
            path=model.path,
            status_code=model.status_code,
            duration_ms=model.duration_ms,
            timing=PhaseTiming.from_dict(model.timing),
            user_id=model.user_id,
            user_agent=model.user_agent,
            ip=model.ip,
            timestamp=model.timestamp,
        )
