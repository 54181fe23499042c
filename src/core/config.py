"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables (and an optional .env file).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Every setting has a default so the service boots with zero configuration

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    ttl = settings.trace_ttl_ms

    if settings.sentry_enabled:
        ...
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. .env file in the working directory
        3. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Portfolio Observability",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/database.sqlite",
        description="Async SQLAlchemy connection URL",
    )
    db_echo: bool = Field(
        default=False,
        description="Log all SQL queries (useful for debugging, disabled in production)",
    )
    database_path: str = Field(
        default="data/database.sqlite",
        description="On-disk database file watched by the capacity monitor",
    )
    max_db_size_mb: int = Field(
        default=100,
        description="Database capacity used as the denominator of the size alert",
    )
    db_size_alert_threshold: float = Field(
        default=0.3,
        description="Fraction of max_db_size_mb at which a capacity warning is sent",
    )

    # Tracing
    trace_ttl_ms: int = Field(
        default=24 * 60 * 60 * 1000,
        description="Request trace retention in milliseconds",
    )

    # Alerting
    alert_history_retention_days: int = Field(
        default=30,
        description="Resolved alert history older than this is deleted",
    )
    sentry_dsn: str | None = Field(
        default=None,
        description="Sentry DSN; the Sentry alert channel is disabled when unset",
    )
    sentry_traces_sample_rate: float = Field(
        default=0.0,
        description="Sentry performance sample rate",
    )
    smtp_host: str | None = Field(default=None, description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP port (465 = implicit TLS)")
    smtp_user: str | None = Field(default=None, description="SMTP username")
    smtp_pass: str | None = Field(default=None, description="SMTP password")
    smtp_from: str = Field(
        default="alerts@example.com",
        description="Sender address for alert emails",
    )
    smtp_timeout_seconds: float = Field(
        default=10.0,
        description="Socket timeout for SMTP delivery",
    )
    alert_email_to: str | None = Field(
        default=None,
        description="Recipient address for alert emails",
    )

    # Rate limiting
    e2e_rate_limit_bypass: bool = Field(
        default=False,
        description="Allow requests carrying the x-e2e-bypass header to skip rate limiting",
    )
    admin_api_token: str | None = Field(
        default=None,
        description="Bearer token for rule management endpoints; they are closed when unset",
    )

    # Background jobs
    scheduler_enabled: bool = Field(
        default=True,
        description="Start periodic maintenance and alert evaluation jobs on startup",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_size_alert_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """
        Validate the capacity threshold is a fraction.

        Args:
            v: Threshold value.

        Returns:
            float: Validated threshold.

        Raises:
            ValueError: If threshold is not in (0, 1].
        """
        if not 0 < v <= 1:
            raise ValueError("db_size_alert_threshold must be between 0 and 1")
        return v

    @field_validator(
        "sentry_dsn",
        "smtp_host",
        "smtp_user",
        "smtp_pass",
        "alert_email_to",
        "admin_api_token",
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """
        Treat empty strings from the environment as unset.

        Args:
            v: Raw value.

        Returns:
            str | None: Stripped value or None.
        """
        if v is None:
            return None
        v = v.strip()
        return v or None

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """Check if running in CI environment."""
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def sentry_enabled(self) -> bool:
        """True when a Sentry DSN is configured."""
        return self.sentry_dsn is not None

    @property
    def email_enabled(self) -> bool:
        """True when host, credentials and recipient are all configured."""
        return all(
            (self.smtp_host, self.smtp_user, self.smtp_pass, self.alert_email_to)
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.
    Tests that change the environment call ``get_settings.cache_clear()``.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
