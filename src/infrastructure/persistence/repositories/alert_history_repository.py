"""AlertHistoryRepository - SQLAlchemy implementation.

Maps between AlertHistory entities and AlertHistoryModel rows.
"""

from datetime import datetime
from typing import Any, cast

from sqlalchemy import delete, select

from src.domain.entities.alert_history import AlertHistory
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.alert_history import AlertHistoryModel


class AlertHistoryRepository:
    """SQLAlchemy implementation of AlertHistoryRepositoryProtocol.

    Example:
        >>> repo = AlertHistoryRepository(database)
        >>> unresolved = await repo.find_unresolved()
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing sessions.
        """
        self._database = database

    async def save(self, history: AlertHistory) -> AlertHistory:
        """Insert a new alert row.

        Args:
            history: Alert to persist (id must be None).

        Returns:
            Alert with its database id assigned.
        """
        model = self._to_model(history)
        async with self._database.get_session() as session:
            session.add(model)
            await session.flush()
            history.id = model.id
        return history

    async def update(self, history: AlertHistory) -> AlertHistory:
        """Persist the resolution fields of an existing alert.

        Raises:
            ValueError: If the alert has no id or no longer exists.
        """
        if history.id is None:
            raise ValueError("Cannot update an alert that was never saved")

        async with self._database.get_session() as session:
            model = await session.get(AlertHistoryModel, history.id)
            if model is None:
                raise ValueError(f"Alert {history.id} not found")
            model.resolved = history.resolved
            model.resolved_at = history.resolved_at
            model.notes = history.notes
        return history

    async def find_by_id(self, alert_id: int) -> AlertHistory | None:
        """Find alert by id.

        Returns:
            AlertHistory if found, None otherwise.
        """
        async with self._database.get_session() as session:
            model = await session.get(AlertHistoryModel, alert_id)
            if model is None:
                return None
            return self._to_entity(model)

    async def find_recent(self, limit: int) -> list[AlertHistory]:
        """Latest alerts, newest first."""
        stmt = (
            select(AlertHistoryModel)
            .order_by(AlertHistoryModel.triggered_at.desc(), AlertHistoryModel.id.desc())
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def find_unresolved(self) -> list[AlertHistory]:
        """Unresolved alerts, newest first."""
        stmt = (
            select(AlertHistoryModel)
            .where(AlertHistoryModel.resolved.is_(False))
            .order_by(AlertHistoryModel.triggered_at.desc(), AlertHistoryModel.id.desc())
        )
        return await self._fetch(stmt)

    async def delete_resolved_before(self, cutoff: datetime) -> int:
        """Delete resolved alerts triggered before ``cutoff``.

        Unresolved alerts are never deleted regardless of age.

        Returns:
            Number of alerts deleted.
        """
        stmt = delete(AlertHistoryModel).where(
            AlertHistoryModel.triggered_at < cutoff,
            AlertHistoryModel.resolved.is_(True),
        )
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
        return cast(Any, result).rowcount or 0

    async def _fetch(self, stmt: Any) -> list[AlertHistory]:
        async with self._database.get_session() as session:
            result = await session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars().all()]

    def _to_model(self, history: AlertHistory) -> AlertHistoryModel:
        return AlertHistoryModel(
            rule_name=history.rule_name,
            metric=history.metric,
            threshold=history.threshold,
            actual_value=history.actual_value,
            triggered_at=history.triggered_at,
            channels=list(history.channels),
            resolved=history.resolved,
            resolved_at=history.resolved_at,
            notes=history.notes,
        )

    def _to_entity(self, model: AlertHistoryModel) -> AlertHistory:
        return AlertHistory(
            id=model.id,
            rule_name=model.rule_name,
            metric=model.metric,
            threshold=model.threshold,
            actual_value=model.actual_value,
            triggered_at=model.triggered_at,
            channels=list(model.channels or []),
            resolved=model.resolved,
            resolved_at=model.resolved_at,
            notes=model.notes,
        )
