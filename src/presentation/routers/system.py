"""System router.

Lightweight health endpoint for monitors and load balancers. It is
excluded from rate limiting and tracing.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.core.config import Settings, get_settings
from src.core.container import get_database, get_scheduler
from src.infrastructure.persistence.database import Database
from src.infrastructure.scheduler.periodic_scheduler import PeriodicScheduler
from src.schemas.observability_schemas import HealthResponse

system_router = APIRouter(tags=["System"])


@system_router.get("/api/health", response_model=HealthResponse)
async def health(
    settings: Annotated[Settings, Depends(get_settings)],
    database: Annotated[Database, Depends(get_database)],
    scheduler: Annotated[PeriodicScheduler, Depends(get_scheduler)],
) -> JSONResponse:
    """Health check.

    Returns:
        JSONResponse: 200 when the database answers, 503 otherwise.
    """
    database_ok = await database.check_connection()
    body = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        version=settings.app_version,
        database=database_ok,
        scheduler_running=scheduler.is_running,
    )
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content=body.model_dump(by_alias=True),
    )
