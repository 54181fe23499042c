"""Alert history database model.

Rows are created when an alert fires, updated only by resolution, and
deleted by retention cleanup once resolved.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, UTCDateTime


class AlertHistoryModel(BaseModel):
    """Triggered alert audit row.

    Fields:
        id: Autoincrement primary key
        rule_name: Rule that fired (indexed, soft reference to config)
        metric: Metric name
        threshold: Threshold at trigger time
        actual_value: Observed value
        triggered_at: Trigger time (indexed for ordering and retention)
        channels: Channel ids as JSON list
        resolved: Resolution flag
        resolved_at: Resolution time
        notes: Operator notes
    """

    __tablename__ = "alert_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rule_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    metric: Mapped[str] = mapped_column(String(64), nullable=False)
    threshold: Mapped[float] = mapped_column(Float, nullable=False)
    actual_value: Mapped[float] = mapped_column(Float, nullable=False)
    triggered_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, index=True
    )
    channels: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
