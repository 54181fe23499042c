"""Rate limit counter database model.

Written by a single INSERT ... ON CONFLICT DO UPDATE per checked request.
"""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class RateLimitEntryModel(BaseModel):
    """Sliding-window counter row.

    Fields:
        key: Composite counter key (primary key)
        count: Requests in the current window
        window_start: Window start, epoch milliseconds
        expires_at: Cleanup deadline, epoch milliseconds (indexed)
    """

    __tablename__ = "rate_limit_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    window_start: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expires_at: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
