"""Alert rules configuration.

Default rule set evaluated every minute by TraceAlertService. Rule names
are unique and double as cooldown keys.
"""

from src.domain.enums import AlertChannelType, AlertMetric
from src.domain.value_objects.alert_rule import AlertRule

DEFAULT_ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        name="High Latency",
        metric=AlertMetric.AVG_DURATION,
        threshold=500,
        window_minutes=5,
        cooldown_minutes=30,
        channels=(AlertChannelType.SENTRY, AlertChannelType.LOG),
    ),
    AlertRule(
        name="High Error Rate",
        metric=AlertMetric.ERROR_RATE,
        threshold=5,
        window_minutes=5,
        cooldown_minutes=30,
        channels=(AlertChannelType.SENTRY, AlertChannelType.LOG),
    ),
    AlertRule(
        name="P95 Latency Spike",
        metric=AlertMetric.P95_DURATION,
        threshold=1000,
        window_minutes=5,
        cooldown_minutes=60,
        channels=(AlertChannelType.SENTRY, AlertChannelType.LOG),
    ),
    # Kept as a template for email delivery; enable once SMTP is configured.
    AlertRule(
        name="Extreme Latency (Disabled)",
        metric=AlertMetric.AVG_DURATION,
        threshold=5000,
        window_minutes=15,
        cooldown_minutes=120,
        channels=(AlertChannelType.EMAIL,),
        enabled=False,
    ),
)
