"""Liveness and readiness endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from starlette.responses import JSONResponse

from src.bookshelf.api.http.deps import get_database_service
from src.bookshelf.core.services.database.db_session import DbSessionService
from src.bookshelf.runtime.context import get_config

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Liveness text for quick manual checks."""
    return "Books Directory API is running..."


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    Returns 200 as long as the process is up. It does not check the database.
    """
    return {"status": "healthy", "service": "books-api"}


@router.get("/health/ready", response_model=None)
def readiness(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness check: 200 when the database answers, 503 otherwise."""
    config = get_config()
    healthy = database_service.health_check()

    response = {
        "status": "ready" if healthy else "not_ready",
        "environment": config.app.environment,
        "checks": {
            "database": {
                "status": "healthy" if healthy else "unhealthy",
                "type": config.database.backend,
            }
        },
    }
    if not healthy:
        return JSONResponse(status_code=503, content=response)
    return response
