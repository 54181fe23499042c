"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the codebase while
remaining backend-agnostic. Implementations MUST ensure logs are structured
(key-value context) and safe (no secrets).

Log Levels:
    - DEBUG: Detailed diagnostic info (event publishing, per-request detail)
    - INFO: Normal operational events (cleanup deletions, scheduler lifecycle)
    - WARNING: Rate limit denials, triggered alerts, skipped channels
    - ERROR: Operation failed, system continues (channel or job failure)
    - CRITICAL: System-wide failure, immediate attention

Security:
    - NEVER log SMTP passwords or the Sentry DSN

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.warning("Rate limit exceeded", key=key, count=count, limit=limit)

    request_logger = logger.bind(trace_id=trace_id)
    request_logger.info("Request completed")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message.
            error: Optional exception instance; implementations include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for catastrophic failures."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
