"""
Health Check Endpoints
Endpoints for health checks and status monitoring.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from ...config.settings import Settings, get_settings
from ...functions import EdgeFunctionClient
from ...orders.operations import system_health
from ..dependencies import get_db, get_function_client
from ..middleware.timing import get_latency_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, str]:
    """Basic liveness check."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/status", status_code=status.HTTP_200_OK)
def status_check(
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Detailed status check.

    Checks status of:
    - Database connection
    - Redis (Celery broker) connection
    - Request latency

    Returns:
        Detailed status information
    """
    status_info = {
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.version,
        "components": {},
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        status_info["components"]["database"] = {
            "status": "healthy",
            "url": settings.database_url.split("@")[-1],
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        status_info["components"]["database"] = {"status": "unhealthy", "error": str(e)}
        status_info["status"] = "degraded"

    # Check Redis
    try:
        import redis

        client = redis.Redis.from_url(settings.broker_url, socket_connect_timeout=2)
        redis_healthy = client.ping()
        status_info["components"]["redis"] = {"status": "healthy" if redis_healthy else "unhealthy"}
        if not redis_healthy:
            status_info["status"] = "degraded"
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        status_info["components"]["redis"] = {"status": "unhealthy", "error": str(e)}
        status_info["status"] = "degraded"

    stats = get_latency_tracker().get_stats()
    status_info["performance"] = {
        "request_count": stats["count"],
        "latency_p50_ms": round(stats["p50"], 2),
        "latency_p95_ms": round(stats["p95"], 2),
        "latency_p99_ms": round(stats["p99"], 2),
        "slow_requests": stats["slow_requests"],
        "slow_request_ms": settings.slow_request_ms,
    }

    return status_info


@router.get("/health/system", status_code=status.HTTP_200_OK)
def system_check(
    functions: EdgeFunctionClient = Depends(get_function_client),
) -> Dict[str, Any]:
    """Remote system health check (database, functions and integrations)."""
    return system_health(functions)
