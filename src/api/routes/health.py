"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.models import AccountModel, ProfileModel
from infrastructure.database.session import get_async_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    checks: dict[str, str] = Field(default_factory=dict)
    profile_cache_ttl_seconds: int | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Liveness check for load balancers.

    Touches nothing but the process itself.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Readiness check: the profile store answers and its tables exist.

    A missing table usually means migrations have not been applied yet.
    """
    checks: dict[str, str] = {}
    tables = (("accounts", AccountModel.id), ("profiles", ProfileModel.account_id))
    for name, column in tables:
        try:
            await db.execute(select(column).limit(1))
            checks[name] = "healthy"
        except SQLAlchemyError as e:
            checks[name] = f"unhealthy: {type(e).__name__}"
            await db.rollback()

    healthy = all(value == "healthy" for value in checks.values())
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=settings.app_version,
        timestamp=_now(),
        environment=settings.app_env,
        checks=checks,
        profile_cache_ttl_seconds=settings.profile_cache_ttl_seconds,
    )
