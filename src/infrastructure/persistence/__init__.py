"""Database persistence infrastructure.

This module provides database-related functionality including:
- Base model and UTC datetime column type
- Database connection and session management
- ORM models and repository implementations
"""

from src.infrastructure.persistence.base import BaseModel, UTCDateTime
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
    "UTCDateTime",
]
