"""Health & Readiness Probes: the gateway's own liveness and readiness endpoints.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the registry is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Readiness does not probe the runtime: an unhealthy runtime is reported by the
      dashboard status, the gateway itself can still answer 404/502 correctly
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from fluor_gateway.core.domain_types import HEALTHY_SENTINEL
from fluor_gateway.infrastructure.clients import UpstreamClients, get_upstream

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": HEALTHY_SENTINEL,
        "service": "fluor-gateway",
        "version": "0.1.0",
    }


@router.get("/ready")
async def readiness_check(upstream: UpstreamClients = Depends(get_upstream)):
    """Readiness probe: includes registry connectivity."""
    if not await upstream.registry.ping():
        logger.warning("Readiness check failed: registry unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "registry_unavailable",
            },
        )
    return {"status": "ready", "checks": {"registry": HEALTHY_SENTINEL}}
