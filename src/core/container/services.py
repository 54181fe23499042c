"""Application service factories.

Wires the rate limit, trace and alert services plus the periodic
scheduler that drives their maintenance jobs.
"""

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.events import get_event_bus
from src.core.container.infrastructure import get_error_tracker, get_logger
from src.core.container.repositories import (
    get_alert_history_repository,
    get_rate_limit_repository,
    get_trace_repository,
)

if TYPE_CHECKING:
    from src.application.services import (
        RateLimitService,
        TraceAlertService,
        TraceService,
    )
    from src.domain.protocols.alert_channel_protocol import AlertChannelProtocol
    from src.infrastructure.scheduler.periodic_scheduler import PeriodicScheduler

MINUTE_SECONDS = 60
HOUR_SECONDS = 60 * MINUTE_SECONDS


@lru_cache()
def get_rate_limit_service() -> "RateLimitService":
    """Get rate limit service singleton with the default rule set."""
    from src.application.services import RateLimitService

    return RateLimitService(
        repository=get_rate_limit_repository(),
        logger=get_logger(),
    )


@lru_cache()
def get_trace_service() -> "TraceService":
    """Get trace service singleton.

    The capacity monitor watches DATABASE_PATH; on non-SQLite backends the
    file does not exist and the check is skipped.
    """
    from src.application.services import TraceService

    settings = get_settings()
    return TraceService(
        repository=get_trace_repository(),
        event_bus=get_event_bus(),
        logger=get_logger(),
        error_tracker=get_error_tracker(),
        ttl_ms=settings.trace_ttl_ms,
        database_path=Path(settings.database_path),
        max_db_size_mb=settings.max_db_size_mb,
        db_size_alert_threshold=settings.db_size_alert_threshold,
    )


@lru_cache()
def get_alert_channels() -> tuple["AlertChannelProtocol", ...]:
    """Build the log, Sentry and email channels from settings."""
    from src.infrastructure.alerts.channels import (
        EmailChannel,
        LogChannel,
        SentryChannel,
        SmtpConfig,
    )

    settings = get_settings()
    logger = get_logger()
    smtp = SmtpConfig(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_pass,
        sender=settings.smtp_from,
        recipient=settings.alert_email_to,
        timeout_seconds=settings.smtp_timeout_seconds,
    )
    return (
        LogChannel(logger=logger),
        SentryChannel(tracker=get_error_tracker(), logger=logger),
        EmailChannel(config=smtp, logger=logger),
    )


@lru_cache()
def get_trace_alert_service() -> "TraceAlertService":
    """Get alert service singleton with the default alert rules."""
    from src.application.services import TraceAlertService

    settings = get_settings()
    return TraceAlertService(
        trace_service=get_trace_service(),
        history_repository=get_alert_history_repository(),
        channels=get_alert_channels(),
        event_bus=get_event_bus(),
        logger=get_logger(),
        retention_days=settings.alert_history_retention_days,
    )


@lru_cache()
def get_scheduler() -> "PeriodicScheduler":
    """Get the periodic scheduler with all maintenance jobs registered.

    Jobs:
        rate_limit_cleanup     every hour
        trace_cleanup          every hour
        trace_db_size_check    every 10 minutes (also at startup)
        alert_evaluation       every minute
        alert_history_cleanup  every 24 hours
    """
    from src.infrastructure.scheduler.periodic_scheduler import PeriodicScheduler

    rate_limit_service = get_rate_limit_service()
    trace_service = get_trace_service()
    alert_service = get_trace_alert_service()

    scheduler = PeriodicScheduler(logger=get_logger())
    scheduler.register(
        "rate_limit_cleanup", HOUR_SECONDS, rate_limit_service.cleanup_expired_entries
    )
    scheduler.register("trace_cleanup", HOUR_SECONDS, trace_service.cleanup_old_traces)
    scheduler.register(
        "trace_db_size_check",
        10 * MINUTE_SECONDS,
        trace_service.check_database_size,
        run_on_start=True,
    )
    scheduler.register("alert_evaluation", MINUTE_SECONDS, alert_service.check_alerts)
    scheduler.register(
        "alert_history_cleanup", 24 * HOUR_SECONDS, alert_service.cleanup_old_alerts
    )
    return scheduler
