"""Alert history entity.

One row per delivered alert (not per evaluation pass). The only mutation
is resolution by an operator.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(slots=True, kw_only=True)
class AlertHistory:
    """Audit record of a triggered alert.

    Business Rules:
        - Created unresolved when a rule fires outside its cooldown
        - Resolving sets resolved_at; notes are only replaced when given
        - Only resolved rows are eligible for retention cleanup

    Attributes:
        rule_name: Name of the rule that fired (soft reference).
        metric: Metric name at trigger time.
        threshold: Rule threshold at trigger time.
        actual_value: Metric value that breached the threshold.
        triggered_at: When the alert fired (UTC).
        channels: Channel ids configured on the rule.
        id: Database id (None until persisted).
        resolved: Whether an operator resolved the alert.
        resolved_at: When it was resolved.
        notes: Operator notes.
    """

    rule_name: str
    metric: str
    threshold: float
    actual_value: float
    triggered_at: datetime
    channels: list[str] = field(default_factory=list)
    id: int | None = None
    resolved: bool = False
    resolved_at: datetime | None = None
    notes: str | None = None

    def resolve(self, notes: str | None = None, now: datetime | None = None) -> None:
        """Mark the alert as resolved.

        Args:
            notes: Optional operator notes. Existing notes are kept when None.
            now: Resolution time (defaults to current UTC time).
        """
        self.resolved = True
        self.resolved_at = now or datetime.now(UTC)
        if notes is not None:
            self.notes = notes
