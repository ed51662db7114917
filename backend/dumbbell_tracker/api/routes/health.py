"""Health check endpoints for monitoring service status."""

import time
from enum import Enum
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dumbbell_tracker import __version__
from dumbbell_tracker.database import get_db

router = APIRouter(tags=["health"])


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
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
    """Check database connectivity."""
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start) * 1000
        return DependencyHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
        )
    except SQLAlchemyError as e:
        return DependencyHealth(
            status=HealthStatus.UNHEALTHY,
            message=str(e),
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Health check with database status."""
    db_health = await check_database(db)
    return HealthResponse(
        status=db_health.status,
        version=__version__,
        dependencies={"database": db_health},
    )


@router.get("/health/live")
async def liveness():
    """
    Liveness probe - is the application running?

    This endpoint always returns 200 if the app is responding.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness(db: Session = Depends(get_db)):
    """
    Readiness probe - can the app handle traffic?

    Returns 503 if the database cannot be reached.
    """
    db_health = await check_database(db)

    if db_health.status == HealthStatus.UNHEALTHY:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": db_health.message},
        )

    return {"status": "ready"}
