"""Health check endpoints."""

from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_session_registry
from core.config import settings
from domain.services.session import SessionRegistry
from infrastructure.database.session import get_async_session

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    cache: str | None = None
    guest_sessions: int | None = None


def _cache_status(directory: str) -> str:
    path = Path(directory)
    if not path.exists():
        # Created on first write
        return "healthy"
    if not path.is_dir():
        return "unhealthy: not a directory"
    probe = path / ".health"
    try:
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
    except OSError as e:
        return f"unhealthy: {e}"
    return "healthy"


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe. Checks nothing beyond the process answering."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    registry: SessionRegistry = Depends(get_session_registry),
) -> HealthResponse:
    """Readiness probe: profile store connectivity and local cache writability."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except (SQLAlchemyError, OSError) as e:
        db_status = f"unhealthy: {e}"

    cache_status = _cache_status(settings.cache_dir)
    healthy = db_status == "healthy" and cache_status == "healthy"

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
        cache=cache_status,
        guest_sessions=registry.guest_count,
    )
