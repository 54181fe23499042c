"""Sentry error-tracking adapter.

Implements ErrorTrackerProtocol on top of sentry_sdk. The SDK is
initialized once, and only when a DSN is configured; without a DSN the
adapter reports itself disabled and ``capture_message`` is a no-op.
"""

from typing import Any

import sentry_sdk

from src.domain.protocols.logger_protocol import LoggerProtocol


class SentryAdapter:
    """Error tracker backed by the Sentry SDK.

    Args:
        dsn: Sentry DSN, or None to disable.
        environment: Environment name attached to events.
        release: Application version attached to events.
        traces_sample_rate: Performance sampling rate.
        logger: Logger for initialization messages.
    """

    def __init__(
        self,
        *,
        dsn: str | None,
        environment: str,
        release: str,
        logger: LoggerProtocol,
        traces_sample_rate: float = 0.0,
    ) -> None:
        self._dsn = dsn
        self._logger = logger
        if dsn:
            sentry_sdk.init(
                dsn=dsn,
                environment=environment,
                release=release,
                traces_sample_rate=traces_sample_rate,
            )
            logger.info("Sentry initialized", environment=environment)

    def is_enabled(self) -> bool:
        return bool(self._dsn)

    def capture_message(
        self,
        message: str,
        *,
        level: str,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Send a message event with tags and extra context.

        Args:
            message: Event message.
            level: Sentry level (info, warning, error).
            tags: Indexed key/value tags.
            extra: Arbitrary structured context.
        """
        if not self.is_enabled():
            return

        with sentry_sdk.new_scope() as scope:
            for key, value in (tags or {}).items():
                scope.set_tag(key, value)
            for key, value in (extra or {}).items():
                scope.set_extra(key, value)
            sentry_sdk.capture_message(message, level=level)
