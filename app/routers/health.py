# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness says the process is up; readiness also checks that the business
# and events collections and the image bucket can be reached.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings
from app.dependencies import BusinessServiceDep

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Service identity and status."""
    status: str
    timestamp: str
    environment: str
    version: str


class DependencyChecks(BaseModel):
    """Per-backend status: "healthy" or "unhealthy: <reason>"."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness status with one entry per backend."""
    status: str
    checks: DependencyChecks
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(service: BusinessServiceDep):
    """
    Readiness check.

    Queries both collections and the image bucket. Reports "degraded" when
    any of them cannot be reached; the response is 200 either way.
    """
    checks = DependencyChecks(**await service.check_readiness())
    ready = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """The process is up and serving requests."""
    return LivenessResponse(status="alive", timestamp=_now())
