"""Alert delivery channels.

Each channel exposes ``channel_id``, ``is_enabled()`` and async ``send()``.
"""

from src.infrastructure.alerts.channels.email_channel import EmailChannel, SmtpConfig
from src.infrastructure.alerts.channels.log_channel import LogChannel
from src.infrastructure.alerts.channels.sentry_channel import SentryChannel

__all__ = ["EmailChannel", "LogChannel", "SentryChannel", "SmtpConfig"]
