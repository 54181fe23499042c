"""Alert rule value objects.

Alert rules compare a windowed trace metric against a threshold. Rules are
configuration, identified by their unique name.

Usage:
    from src.domain.value_objects import AlertRule
    from src.domain.enums import AlertChannelType, AlertMetric

    rule = AlertRule(
        name="High Latency",
        metric=AlertMetric.AVG_DURATION,
        threshold=500,
        window_minutes=5,
        cooldown_minutes=30,
        channels=(AlertChannelType.SENTRY, AlertChannelType.LOG),
    )
"""

from dataclasses import dataclass

from src.domain.enums import AlertChannelType, AlertMetric


@dataclass(frozen=True, slots=True, kw_only=True)
class AlertRule:
    """Threshold alert rule (value object).

    Attributes:
        name: Unique rule name (also the cooldown key).
        metric: Windowed metric to compare.
        threshold: Rule triggers when the metric is strictly greater.
        window_minutes: Evaluation window length.
        cooldown_minutes: Delivery suppression after a trigger.
        channels: Channels the alert is delivered to.
        enabled: Disabled rules are skipped by evaluation.

    Raises:
        ValueError: If name is blank, threshold is negative, the window is
            not positive or the cooldown is negative.
    """

    name: str
    metric: AlertMetric
    threshold: float
    window_minutes: int
    cooldown_minutes: int
    channels: tuple[AlertChannelType, ...]
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must not be blank")
        if self.threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {self.threshold}")
        if self.window_minutes <= 0:
            raise ValueError(
                f"window_minutes must be positive, got {self.window_minutes}"
            )
        if self.cooldown_minutes < 0:
            raise ValueError(
                f"cooldown_minutes must be non-negative, got {self.cooldown_minutes}"
            )


@dataclass(frozen=True, slots=True, kw_only=True)
class WindowStats:
    """Metric snapshot used to evaluate a rule for one window."""

    count: int
    avg_duration: float
    error_rate: float
    p95_duration: float

    def value_for(self, metric: AlertMetric) -> float:
        """Return the value of ``metric`` in this snapshot."""
        match metric:
            case AlertMetric.AVG_DURATION:
                return self.avg_duration
            case AlertMetric.ERROR_RATE:
                return self.error_rate
            case AlertMetric.P95_DURATION:
                return self.p95_duration
        raise ValueError(f"Unknown metric: {metric}")


@dataclass(frozen=True, slots=True, kw_only=True)
class AlertCheckResult:
    """Outcome of evaluating one rule."""

    rule_name: str
    triggered: bool
    current_value: float
    threshold: float
    in_cooldown: bool
