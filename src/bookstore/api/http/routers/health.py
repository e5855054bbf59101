"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from src.bookstore.api.http.deps import get_database_service
from src.bookstore.core.services import DbManageService, DbSessionService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy", "service": "bookstore"}


@router.get("/ready", response_model=None)
def readiness(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: the database answers and the schema is fully migrated.

    Returns 200 when ready, 503 otherwise.
    """
    checks: dict[str, Any] = {}

    db_healthy = database_service.health_check()
    checks["database"] = {"status": "healthy" if db_healthy else "unhealthy"}

    schema_ready = False
    if db_healthy:
        try:
            schema_ready = DbManageService(database_service.engine).is_up_to_date()
        except SQLAlchemyError as e:
            logger.error("Schema check failed: {}", e)
    checks["schema"] = {"status": "current" if schema_ready else "pending_migrations"}

    body = {"status": "ready" if db_healthy and schema_ready else "not_ready", "checks": checks}
    if body["status"] != "ready":
        return JSONResponse(status_code=503, content=body)
    return body
