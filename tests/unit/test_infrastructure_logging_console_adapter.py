"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- LoggerProtocol methods forwarding to structlog
- Exception details on error/critical
- Context binding
- Renderer selection and level validation

Architecture:
- structlog is patched; no real output
"""

from unittest.mock import MagicMock, patch

import pytest

from src.infrastructure.logging.console_adapter import ConsoleAdapter

STRUCTLOG = "src.infrastructure.logging.console_adapter.structlog"


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    def test_info_logs_message_with_context(self):
        """Test info() forwards message and structured context."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            adapter.info("Scheduler started", jobs=["trace_cleanup"])

            mock_logger.info.assert_called_once_with(
                "Scheduler started", jobs=["trace_cleanup"]
            )

    def test_warning_logs_message_with_context(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            ConsoleAdapter().warning("Rate limit exceeded", key="ip:1.2.3.4:/api/**")

            mock_logger.warning.assert_called_once_with(
                "Rate limit exceeded", key="ip:1.2.3.4:/api/**"
            )

    def test_error_adds_exception_details(self):
        """Test error() flattens the exception into error_type/error_message."""
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            ConsoleAdapter().error(
                "Scheduled job failed", error=RuntimeError("db locked"), job="trace_cleanup"
            )

            mock_logger.error.assert_called_once_with(
                "Scheduled job failed",
                job="trace_cleanup",
                error_type="RuntimeError",
                error_message="db locked",
            )

    def test_error_without_exception(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            ConsoleAdapter().error("Failed to send alert email")

            mock_logger.error.assert_called_once_with("Failed to send alert email")

    def test_critical_adds_exception_details(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            mock_structlog.get_logger.return_value = mock_logger

            ConsoleAdapter().critical("Database unreachable", error=OSError("refused"))

            mock_logger.critical.assert_called_once_with(
                "Database unreachable", error_type="OSError", error_message="refused"
            )


@pytest.mark.unit
class TestConsoleAdapterBinding:
    """Test context binding."""

    def test_bind_returns_new_adapter_with_bound_logger(self):
        with patch(STRUCTLOG) as mock_structlog:
            mock_logger = MagicMock()
            bound_logger = MagicMock()
            mock_logger.bind.return_value = bound_logger
            mock_structlog.get_logger.return_value = mock_logger

            adapter = ConsoleAdapter()
            bound = adapter.with_context(trace_id="abc")
            bound.info("Recorded")

            assert bound is not adapter
            mock_logger.bind.assert_called_once_with(trace_id="abc")
            bound_logger.info.assert_called_once_with("Recorded")
            mock_logger.info.assert_not_called()


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test structlog configuration."""

    def test_json_renderer_when_requested(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(use_json=True)

            processors = mock_structlog.configure.call_args.kwargs["processors"]
            assert processors[-1] is mock_structlog.processors.JSONRenderer.return_value

    def test_console_renderer_by_default(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter()

            processors = mock_structlog.configure.call_args.kwargs["processors"]
            assert processors[-1] is mock_structlog.dev.ConsoleRenderer.return_value

    def test_level_is_applied_to_filtering_logger(self):
        with patch(STRUCTLOG) as mock_structlog:
            ConsoleAdapter(level="warning")

            mock_structlog.make_filtering_bound_logger.assert_called_once_with(30)

    def test_unknown_level_rejected(self):
        with patch(STRUCTLOG), pytest.raises(ValueError, match="Unknown log level"):
            ConsoleAdapter(level="LOUD")
