"""Observability API routers mounted under ``/api``.

Resources:
    /api/traces           - Request traces, statistics and live stream
    /api/alerts           - Alert history, rules and live stream
    /api/rate-limit/rules - Rate limit rule management

Every route runs ``mark_handler_start`` first so the trace records when the
handler phase began.
"""

from fastapi import APIRouter, Depends

from src.presentation.api.middleware.phase_timer import mark_handler_start
from src.presentation.routers.api import alerts, rate_limits, traces

api_router = APIRouter(prefix="/api", dependencies=[Depends(mark_handler_start)])
api_router.include_router(traces.router)
api_router.include_router(alerts.router)
api_router.include_router(rate_limits.router)

__all__ = ["api_router"]
