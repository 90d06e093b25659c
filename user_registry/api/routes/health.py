"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 "OK" if the process is up (liveness)
    - GET /health/ready returns 503 if the database is not ready (readiness)
    - Neither endpoint goes through the readiness guard
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from user_registry.api.dependencies import get_db_manager
from user_registry.core.errors import DatabaseUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_class=PlainTextResponse)
async def health_check():
    """Basic liveness probe."""
    return "OK"


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: includes database connectivity."""
    manager = get_db_manager(request)
    ready = False
    if manager is not None:
        try:
            await manager.ensure_ready()
            ready = True
        except DatabaseUnavailableError as e:
            logger.warning(f"Readiness check failed: {e}")
    if not ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
