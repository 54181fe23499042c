"""Email alert channel.

Sends an HTML summary over SMTP. Port 465 uses implicit TLS, any other
port uses STARTTLS. The blocking smtplib calls run in a worker thread with
a socket timeout so a slow server never stalls the event loop. Delivery
failures are logged and swallowed.
"""

import asyncio
import html
import smtplib
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.domain.enums import AlertChannelType
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects.alert_rule import AlertRule
from src.domain.value_objects.trace_values import TraceStats

IMPLICIT_TLS_PORT = 465


@dataclass(frozen=True, slots=True, kw_only=True)
class SmtpConfig:
    """SMTP connection settings.

    Attributes:
        host: SMTP host; the channel is disabled when unset.
        port: SMTP port.
        user: Login user.
        password: Login password.
        sender: From address.
        recipient: Alert recipient.
        timeout_seconds: Socket timeout.
    """

    host: str | None
    port: int = 587
    user: str | None = None
    password: str | None = None
    sender: str = "alerts@example.com"
    recipient: str | None = None
    timeout_seconds: float = 10.0

    @property
    def is_complete(self) -> bool:
        return all((self.host, self.user, self.password, self.recipient))

    @property
    def implicit_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT


def build_subject(rule: AlertRule) -> str:
    return f"[Alert] {rule.name} threshold exceeded"


def build_html_body(
    rule: AlertRule,
    stats: TraceStats,
    actual_value: float,
    triggered_at: datetime | None = None,
) -> str:
    """Render the alert as a small HTML table."""
    triggered_at = triggered_at or datetime.now(UTC)
    rows = (
        ("Rule", html.escape(rule.name)),
        ("Metric", rule.metric.value),
        ("Threshold", f"{rule.threshold}"),
        ("Actual", f"{actual_value:.2f}"),
        ("Window", f"{rule.window_minutes} minutes"),
        ("Requests", f"{stats.total_count}"),
        ("Avg duration", f"{stats.avg_duration:.2f}ms"),
        ("Error rate", f"{stats.error_rate:.2f}%"),
        ("Triggered at", triggered_at.strftime("%Y-%m-%d %H:%M:%S UTC")),
    )
    table_rows = "\n".join(
        f"      <tr><th align=\"left\">{label}</th><td>{value}</td></tr>"
        for label, value in rows
    )
    return (
        "<html>\n"
        "  <body>\n"
        f"    <h2>Alert: {html.escape(rule.name)}</h2>\n"
        "    <table cellpadding=\"4\">\n"
        f"{table_rows}\n"
        "    </table>\n"
        "  </body>\n"
        "</html>\n"
    )


class EmailChannel:
    """Alert channel that emails a summary to one recipient."""

    channel_id = AlertChannelType.EMAIL.value

    def __init__(self, config: SmtpConfig, logger: LoggerProtocol) -> None:
        self._config = config
        self._logger = logger

    def is_enabled(self) -> bool:
        return self._config.is_complete

    async def send(
        self, rule: AlertRule, stats: TraceStats, actual_value: float
    ) -> None:
        if not self.is_enabled():
            self._logger.warning("Email not configured, skipping alert", alert=rule.name)
            return

        message = MIMEMultipart("alternative")
        message["Subject"] = build_subject(rule)
        message["From"] = self._config.sender
        message["To"] = self._config.recipient or ""
        message.attach(MIMEText(build_html_body(rule, stats, actual_value), "html"))

        try:
            await asyncio.to_thread(self._deliver, message)
        except Exception as e:
            self._logger.error(
                "Failed to send alert email",
                error=e,
                alert=rule.name,
                recipient=self._config.recipient,
            )
            return

        self._logger.info(
            "Sent alert email", alert=rule.name, recipient=self._config.recipient
        )

    def _deliver(self, message: MIMEMultipart) -> None:
        config = self._config
        host = config.host or ""
        context = ssl.create_default_context()

        server: smtplib.SMTP
        if config.implicit_tls:
            server = smtplib.SMTP_SSL(
                host, config.port, timeout=config.timeout_seconds, context=context
            )
        else:
            server = smtplib.SMTP(host, config.port, timeout=config.timeout_seconds)

        with server:
            if not config.implicit_tls:
                server.starttls(context=context)
            server.login(config.user or "", config.password or "")
            server.sendmail(
                config.sender, [config.recipient or ""], message.as_string()
            )
