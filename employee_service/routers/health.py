"""
Health check and monitoring endpoints.
"""

import asyncio
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from employee_service.database import Database, get_db
from employee_service.models import HealthStatus
from employee_service.services.audit_store import AuditLogStore, get_audit_store

router = APIRouter(tags=["monitoring"])

# Track application start time
START_TIME = time.time()


def _connected(healthy: bool) -> str:
    return "connected" if healthy else "disconnected"


@router.get("/health", response_model=HealthStatus)
async def health_check(
    request: Request,
    db: Database = Depends(get_db),
    audit_store: AuditLogStore = Depends(get_audit_store)
):
    """
    Health check endpoint.

    Returns the overall health status of the service including:
    - Record store (PostgreSQL) connectivity
    - Audit log store (DynamoDB) connectivity
    - Service uptime
    - Application version
    """
    db_healthy, audit_healthy = await asyncio.gather(
        db.health_check(),
        audit_store.health_check()
    )

    return HealthStatus(
        status="healthy" if db_healthy and audit_healthy else "unhealthy",
        version=request.app.state.settings.app_version,
        database=_connected(db_healthy),
        audit_store=_connected(audit_healthy),
        uptime_seconds=time.time() - START_TIME,
        timestamp=datetime.now(timezone.utc)
    )


@router.get("/health/live")
async def liveness_check():
    """
    Kubernetes liveness probe.

    Simple check that the application is running.
    Does not check dependencies.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(
    db: Database = Depends(get_db),
    audit_store: AuditLogStore = Depends(get_audit_store)
):
    """
    Kubernetes readiness probe.

    Both stores must be reachable before traffic is accepted, since every
    mutation writes to both.
    """
    if not await db.health_check():
        return Response(
            content='{"status": "not ready", "reason": "database disconnected"}',
            status_code=503,
            media_type="application/json"
        )

    if not await audit_store.health_check():
        return Response(
            content='{"status": "not ready", "reason": "audit store disconnected"}',
            status_code=503,
            media_type="application/json"
        )

    return {"status": "ready"}


async def metrics(request: Request):
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format including:
    - Employee mutation counts per action
    - Audit log write counts, failures and latency
    """
    if not request.app.state.settings.enable_metrics:
        return Response(status_code=404)

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/info")
async def info(request: Request):
    """
    Service information endpoint.

    Returns basic information about the running service.
    """
    settings = request.app.state.settings
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime_seconds": time.time() - START_TIME
    }
