# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import ContactStoreDep
from lib.contact_store import ContactStoreError

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    store: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(store: ContactStoreDep):
    """
    Readiness check endpoint.

    Returns whether the contact store can be reached.
    """
    try:
        store.ping()
        store_status = "healthy"
    except ContactStoreError as e:
        logger.warning(f"Readiness check failed: {e}")
        store_status = f"unhealthy: {str(e)[:50]}"

    return ReadinessResponse(
        status="ready" if store_status == "healthy" else "degraded",
        store=store_status,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return {"status": "alive", "timestamp": _now()}
