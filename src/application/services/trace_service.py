"""Trace service.

Records one trace per completed request, answers trace queries and runs
two maintenance jobs: TTL cleanup and database capacity monitoring.

Architecture:
    - Application service over TraceRepositoryProtocol
    - Publishes TraceCreated after each successful write
    - Storage errors from record_trace propagate to the caller
    - The capacity monitor is advisory and never raises

Usage:
    trace = await trace_service.record_trace(trace_input)
    stats = await trace_service.get_stats()
"""

from datetime import timedelta
from pathlib import Path
from uuid import UUID

from src.core.clock import Clock, utc_now
from src.domain.entities.request_trace import RequestTrace
from src.domain.events import TraceCreated
from src.domain.protocols.error_tracker_protocol import ErrorTrackerProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.trace_repository import TraceRepositoryProtocol
from src.domain.value_objects.trace_values import (
    EndpointStats,
    HourlyStats,
    TraceFilters,
    TraceInput,
    TraceStats,
)

DEFAULT_TRACE_TTL_MS = 24 * 60 * 60 * 1000
BYTES_PER_MB = 1024 * 1024


class TraceService:
    """Request trace recorder and query service.

    Args:
        repository: Trace storage.
        event_bus: Bus receiving TraceCreated events.
        logger: Structured logger.
        error_tracker: Receives database capacity warnings.
        ttl_ms: Trace retention.
        database_path: Database file checked by the capacity monitor
            (None disables the check).
        max_db_size_mb: Capacity the file size is compared against.
        db_size_alert_threshold: Usage fraction that triggers a warning.
        clock: Time source.
    """

    def __init__(
        self,
        *,
        repository: TraceRepositoryProtocol,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        error_tracker: ErrorTrackerProtocol,
        ttl_ms: int = DEFAULT_TRACE_TTL_MS,
        database_path: Path | None = None,
        max_db_size_mb: int = 100,
        db_size_alert_threshold: float = 0.3,
        clock: Clock = utc_now,
    ) -> None:
        self._repository = repository
        self._event_bus = event_bus
        self._logger = logger
        self._error_tracker = error_tracker
        self._ttl = timedelta(milliseconds=ttl_ms)
        self._database_path = database_path
        self._max_db_bytes = max_db_size_mb * BYTES_PER_MB
        self._max_db_size_mb = max_db_size_mb
        self._db_size_alert_threshold = db_size_alert_threshold
        self._clock = clock

    async def record_trace(self, trace_input: TraceInput) -> RequestTrace:
        """Persist a trace and publish TraceCreated.

        Args:
            trace_input: Data captured by the request pipeline.

        Returns:
            RequestTrace: The stored trace.
        """
        trace = RequestTrace(
            trace_id=trace_input.trace_id,
            method=trace_input.method,
            path=trace_input.path,
            status_code=trace_input.status_code,
            duration_ms=trace_input.duration_ms,
            timing=trace_input.timing,
            user_id=trace_input.user_id,
            user_agent=trace_input.user_agent,
            ip=trace_input.ip,
            timestamp=self._clock(),
        )
        saved = await self._repository.save(trace)
        await self._event_bus.publish(TraceCreated(trace=saved))
        return saved

    async def get_recent_traces(
        self, filters: TraceFilters | None = None
    ) -> list[RequestTrace]:
        """Traces matching ``filters`` (defaults: newest 100)."""
        return await self._repository.find_recent(filters or TraceFilters())

    async def get_trace_by_id(self, trace_id: UUID) -> RequestTrace | None:
        return await self._repository.find_by_id(trace_id)

    async def get_trace_count(self) -> int:
        return await self._repository.count()

    async def get_stats(self) -> TraceStats:
        """Overall statistics; all zero when no traces are retained."""
        return await self._repository.get_stats()

    async def get_hourly_stats(self, hours: int = 24) -> list[HourlyStats]:
        """Per-hour statistics for the last ``hours`` hours.

        Hours without traffic are omitted. Sorted oldest hour first, so the
        last element is the most recent bucket.

        Raises:
            ValueError: If hours is not positive.
        """
        if hours <= 0:
            raise ValueError(f"hours must be positive, got {hours}")
        since = self._clock() - timedelta(hours=hours)
        return await self._repository.get_hourly_stats(since)

    async def get_endpoint_stats(self, limit: int = 20) -> list[EndpointStats]:
        """Busiest (path, method) pairs with their statistics.

        Raises:
            ValueError: If limit is not positive.
        """
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        return await self._repository.get_endpoint_stats(limit)

    async def cleanup_old_traces(self) -> int:
        """Delete traces older than the retention TTL.

        Returns:
            int: Number of traces deleted.
        """
        cutoff = self._clock() - self._ttl
        deleted = await self._repository.delete_older_than(cutoff)
        if deleted > 0:
            self._logger.info(
                "Cleaned up old traces", deleted=deleted, cutoff=cutoff.isoformat()
            )
        return deleted

    async def check_database_size(self) -> float | None:
        """Warn the error tracker when the database file nears capacity.

        Best effort: a missing file or any read/query error is logged and
        swallowed.

        Returns:
            float | None: Usage ratio, or None when it could not be measured.
        """
        if self._database_path is None:
            return None

        try:
            if not self._database_path.exists():
                self._logger.debug(
                    "Database file not found, skipping size check",
                    path=str(self._database_path),
                )
                return None

            size_bytes = self._database_path.stat().st_size
            usage_ratio = size_bytes / self._max_db_bytes

            if usage_ratio >= self._db_size_alert_threshold:
                trace_count = await self._repository.count()
                size_mb = size_bytes / BYTES_PER_MB
                message = (
                    f"Database size alert: {size_mb:.2f}MB / "
                    f"{self._max_db_size_mb}MB ({usage_ratio * 100:.1f}% of capacity)"
                )
                self._logger.warning(
                    message,
                    size_bytes=size_bytes,
                    usage_ratio=round(usage_ratio, 4),
                    trace_count=trace_count,
                )
                self._error_tracker.capture_message(
                    message,
                    level="warning",
                    tags={"component": "TraceService", "alert": "database-capacity"},
                    extra={
                        "sizeBytes": size_bytes,
                        "maxBytes": self._max_db_bytes,
                        "usageRatio": usage_ratio,
                        "traceCount": trace_count,
                    },
                )
            return usage_ratio
        except Exception as e:
            self._logger.error(
                "Database size check failed",
                error=e,
                path=str(self._database_path),
            )
            return None
