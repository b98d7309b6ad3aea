# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# - /health: process is up, reports environment and version
# - /health/ready: operation log table reachable and every configured bucket
#   (received, extracted, completed, user profiles) exists
# - /health/live: process liveness for the orchestrator
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.dependencies import SettingsDep, SupabaseDep
from core.services.log_service import LOG_TABLE

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """
    Readiness of the service's dependencies.

    Example:
        {
            "status": "degraded",
            "database": "ok",
            "buckets": {"Receive_Files": "ok", "Completed": "missing"},
            "timestamp": "2024-01-15T10:30:00+00:00"
        }
    """

    status: str
    database: str
    buckets: dict[str, str] = Field(default_factory=dict)
    timestamp: str


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    """Basic health status for load balancers."""
    return HealthResponse(
        status="healthy",
        timestamp=_utc_now(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(supabase: SupabaseDep, settings: SettingsDep):
    """
    Check the operation log table and the storage buckets this service uses.

    Status is "ready" only when the table answers and every bucket exists.
    """
    try:
        supabase.table(LOG_TABLE).select("id").limit(1).execute()
        database = "ok"
    except Exception as e:
        logger.warning(f"Readiness: {LOG_TABLE} unreachable: {e}")
        database = f"unreachable: {str(e)[:80]}"

    required = [
        settings.SUPABASE_BUCKET,
        settings.EXTRACTED_BUCKET,
        settings.COMPLETED_BUCKET,
        settings.USER_BUCKET,
    ]
    try:
        existing = {bucket.name for bucket in supabase.raw.storage.list_buckets()}
        buckets = {name: "ok" if name in existing else "missing" for name in required}
    except Exception as e:
        logger.warning(f"Readiness: bucket listing failed: {e}")
        buckets = {name: "unknown" for name in required}

    ready = database == "ok" and all(state == "ok" for state in buckets.values())

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        database=database,
        buckets=buckets,
        timestamp=_utc_now(),
    )


@router.get("/health/live")
async def liveness_check():
    """Process is alive."""
    return {"status": "alive", "timestamp": _utc_now()}
