"""Request trace database model.

Append-only: rows are inserted once per completed request and removed in
bulk by TTL cleanup.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Float, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, UTCDateTime


class RequestTraceModel(BaseModel):
    """One completed HTTP request with phase timing.

    Fields:
        trace_id: UUID primary key (X-Trace-Id)
        method: HTTP method
        path: Request path (indexed for filtering and grouping)
        status_code: Response status (indexed for error-rate queries)
        duration_ms: Total duration in milliseconds
        timing: Phase breakdown as camelCase JSON
        user_id: Authenticated user id (nullable)
        user_agent: Client user agent
        ip: Client IP
        timestamp: Record time in UTC (indexed for TTL and hourly stats)

    Indexes:
        - ix_request_traces_path_method: grouping for endpoint stats
    """

    __tablename__ = "request_traces"

    trace_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    method: Mapped[str] = mapped_column(String(16), nullable=False)
    path: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)
    status_code: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    duration_ms: Mapped[float] = mapped_column(Float, nullable=False)
    timing: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_agent: Mapped[str] = mapped_column(String(512), nullable=False)
    ip: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, index=True
    )

    __table_args__ = (Index("ix_request_traces_path_method", "path", "method"),)
