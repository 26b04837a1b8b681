"""Health & Readiness Probes: liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the configured store is unreachable (readiness)

Design Decisions:
    - Readiness goes through the KeyValueStore protocol (exists on the root),
      so it covers whichever adapter is configured
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from scavenger.core.errors import StoreError
from scavenger.services.directories import Directories, get_directories

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "scavenger-integrity-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(dirs: Directories = Depends(get_directories)):
    """Readiness probe: includes store connectivity."""
    try:
        await dirs.store.exists(str(dirs.keys.root))
    except StoreError as e:
        logger.error(f"Store readiness check failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "store_unavailable"},
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
