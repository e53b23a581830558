"""
Customer Registry Backend — Health Check Route
================================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Reports version and uptime. The customer store has no external
       dependency that could become unreachable, so the service is healthy
       whenever it can answer.
Who:   Called by Docker health checks, load balancers, and monitoring systems.
"""

import logging
import time

from fastapi import APIRouter

from app import __version__
from app.schemas.customer import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the customer registry service.",
)
async def health_check() -> HealthResponse:
    """Report service status, version and uptime."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
