"""Domain protocols (ports).

Structural interfaces implemented by infrastructure adapters and consumed
by application services. Tests swap real adapters for fakes or mocks.
"""

from src.domain.protocols.alert_channel_protocol import AlertChannelProtocol
from src.domain.protocols.alert_history_repository import (
    AlertHistoryRepositoryProtocol,
)
from src.domain.protocols.error_tracker_protocol import ErrorTrackerProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rate_limit_repository import RateLimitRepositoryProtocol
from src.domain.protocols.trace_repository import TraceRepositoryProtocol

__all__ = [
    "AlertChannelProtocol",
    "AlertHistoryRepositoryProtocol",
    "ErrorTrackerProtocol",
    "EventBusProtocol",
    "EventHandler",
    "LoggerProtocol",
    "RateLimitRepositoryProtocol",
    "TraceRepositoryProtocol",
]
