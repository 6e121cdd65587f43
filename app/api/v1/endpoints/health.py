"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.database import database

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    timestamp: datetime
    version: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response model."""

    status: str
    version: str
    environment: str
    database: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    """
    Liveness probe. Does not touch the database.

    Returns:
        Basic health status
    """
    return HealthResponse(
        status="ok",
        message="API is running",
        timestamp=datetime.now(UTC),
        version=settings.app_version,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Detailed health check including the record store.

    Returns:
        Detailed health status including dependencies
    """
    db_healthy = await database.check_connection()

    return DetailedHealthResponse(
        status="ok" if db_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
    )
