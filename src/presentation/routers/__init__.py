"""HTTP routers.

- api: observability resources under ``/api``
- system: health check
"""

from src.presentation.routers.api import api_router
from src.presentation.routers.system import system_router

__all__ = ["api_router", "system_router"]
