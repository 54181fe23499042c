"""Container module - Centralized dependency injection.

All factories are ``lru_cache`` singletons:

    from src.core.container import get_trace_service, get_logger, ...

The container is organized into modules:
- infrastructure: database, logging, error tracking
- events: event bus and SSE event stream
- repositories: repository factories
- services: application services, alert channels, scheduler
"""

from src.core.container.events import get_event_bus, get_event_stream
from src.core.container.infrastructure import (
    get_database,
    get_error_tracker,
    get_logger,
)
from src.core.container.repositories import (
    get_alert_history_repository,
    get_rate_limit_repository,
    get_trace_repository,
)
from src.core.container.services import (
    get_alert_channels,
    get_rate_limit_service,
    get_scheduler,
    get_trace_alert_service,
    get_trace_service,
)

_FACTORIES = (
    get_database,
    get_logger,
    get_error_tracker,
    get_event_bus,
    get_event_stream,
    get_rate_limit_repository,
    get_trace_repository,
    get_alert_history_repository,
    get_rate_limit_service,
    get_trace_service,
    get_alert_channels,
    get_trace_alert_service,
    get_scheduler,
)


def clear_container_cache() -> None:
    """Drop every cached singleton (tests and settings reloads)."""
    for factory in _FACTORIES:
        factory.cache_clear()


__all__ = [
    "clear_container_cache",
    # Infrastructure
    "get_database",
    "get_logger",
    "get_error_tracker",
    # Events
    "get_event_bus",
    "get_event_stream",
    # Repositories
    "get_rate_limit_repository",
    "get_trace_repository",
    "get_alert_history_repository",
    # Services
    "get_rate_limit_service",
    "get_trace_service",
    "get_alert_channels",
    "get_trace_alert_service",
    "get_scheduler",
]
