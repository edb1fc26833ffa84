"""Health check endpoints for monitoring service status."""

import asyncio
import time
from enum import Enum
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from aihealth.api.deps import get_source
from aihealth.database import get_db
from aihealth.sources.base import HealthDataSource

router = APIRouter(tags=["health"])


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class DependencyHealth(BaseModel):
    """Health status of a single dependency."""
    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """Full health check response."""
    status: HealthStatus
    version: str
    dependencies: Dict[str, DependencyHealth]


async def check_database(db: Session) -> DependencyHealth:
    """Check settings store connectivity."""
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start) * 1000
        return DependencyHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
        )
    except Exception as e:
        return DependencyHealth(
            status=HealthStatus.UNHEALTHY,
            message=str(e),
        )


async def check_health_data(source: HealthDataSource) -> DependencyHealth:
    """Check whether the live health data source can be read."""
    try:
        start = time.perf_counter()
        available = await source.is_available()
        latency = (time.perf_counter() - start) * 1000

        if available:
            return DependencyHealth(
                status=HealthStatus.HEALTHY,
                latency_ms=round(latency, 2),
            )
        # Manual, mock and random snapshots still work without it
        return DependencyHealth(
            status=HealthStatus.DEGRADED,
            message="Health data source not available",
        )
    except Exception as e:
        return DependencyHealth(
            status=HealthStatus.DEGRADED,
            message=str(e),
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: Session = Depends(get_db),
    source: HealthDataSource = Depends(get_source),
) -> HealthResponse:
    """
    Health check with dependency status.

    - database: settings store
    - health_data: live data source (optional)
    """
    db_health, data_health = await asyncio.gather(
        check_database(db),
        check_health_data(source),
    )

    dependencies = {
        "database": db_health,
        "health_data": data_health,
    }

    if db_health.status == HealthStatus.UNHEALTHY:
        overall = HealthStatus.UNHEALTHY
    elif data_health.status != HealthStatus.HEALTHY:
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return HealthResponse(
        status=overall,
        version="0.1.0",
        dependencies=dependencies,
    )


@router.get("/health/live")
async def liveness():
    """Liveness probe: always 200 while the app responds."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness(db: Session = Depends(get_db)):
    """
    Readiness probe.

    Returns 503 while the settings store cannot be reached.
    """
    db_health = await check_database(db)

    if db_health.status == HealthStatus.UNHEALTHY:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": db_health.message},
        )

    return {"status": "ready"}
