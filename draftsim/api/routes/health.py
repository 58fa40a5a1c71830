from typing import Dict, Any
import time
import psutil
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..engine import DraftEngine, get_engine


router = APIRouter()

class HealthStatus(BaseModel):
    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: datetime
    version: str
    uptime_seconds: float
    checks: Dict[str, Any]


class SystemMetrics(BaseModel):
    cpu_percent: float
    memory_percent: float
    memory_available_mb: float
    disk_usage_percent: float


# Track startup time for uptime calculation
_startup_time = time.time()


def _version(request: Request) -> str:
    return request.app.state.config.get("version", "unknown")


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Fast enough for load balancer probes; does not touch engine data.
    """
    uptime = time.time() - _startup_time

    checks = {
        "api": "healthy",
        "uptime_seconds": uptime,
    }

    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=_version(request),
        uptime_seconds=uptime,
        checks=checks
    )


@router.get("/health/detailed", response_model=Dict[str, Any])
async def detailed_health_check(request: Request, engine: DraftEngine = Depends(get_engine)):
    """
    Detailed health check with system metrics and engine data checks.
    """
    uptime = time.time() - _startup_time

    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    system_metrics = SystemMetrics(
        cpu_percent=psutil.cpu_percent(interval=None),
        memory_percent=memory.percent,
        memory_available_mb=memory.available / 1024 / 1024,
        disk_usage_percent=disk.percent
    )

    dependency_checks = {
        "draft_records": check_draft_records(engine),
        "player_pool": check_player_pool(engine),
    }

    failed_checks = [name for name, status in dependency_checks.items()
                     if status != "healthy"]

    if failed_checks:
        if len(failed_checks) == len(dependency_checks):
            overall_status = "unhealthy"
        else:
            overall_status = "degraded"
    else:
        overall_status = "healthy"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": _version(request),
        "uptime_seconds": uptime,
        "system_metrics": system_metrics.model_dump(),
        "dependency_checks": dependency_checks,
        "failed_checks": failed_checks,
        "active_mock_drafts": len(engine.sessions),
        "cached_profiles": len(engine.profile_cache),
    }


@router.get("/health/ready")
async def readiness_check(engine: DraftEngine = Depends(get_engine)):
    """
    Readiness probe.

    Returns 503 until a player pool is loaded; mock drafts cannot run
    without one.
    """
    if check_player_pool(engine) != "healthy":
        raise HTTPException(status_code=503, detail="Player pool not loaded")

    return {
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "draft_records": len(engine.records),
        "players": len(engine.player_pool),
    }


@router.get("/health/live")
async def liveness_check():
    """Liveness probe; if we can respond, we're alive."""
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


def check_draft_records(engine: DraftEngine) -> str:
    return "healthy" if engine.records else "unhealthy"


def check_player_pool(engine: DraftEngine) -> str:
    return "healthy" if engine.player_pool else "unhealthy"
