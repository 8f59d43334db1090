"""Health Probes — liveness and election-store readiness.

Invariants:
    - GET /health/ answers 200 whenever the process serves requests
    - GET /health/ready answers 503 until the election store responds to a ping
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import voting.infrastructure.database as database
from voting.services import election_service

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {
        "status": "healthy",
        "service": "voting-api",
        "live_elections": election_service.live_count(),
    }


@router.get("/ready")
async def readiness():
    """Ready once the election store answers."""
    if database.store is None or not await database.store.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "election_store_unavailable"},
        )
    return {"status": "ready", "checks": {"election_store": "healthy"}}
