"""
Product Catalog API: Health Check and Root Routes
==================================================

What:  GET / (welcome text) and GET /health (dependency status).
Who:   /health is polled by Docker health checks and load balancers.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (still HTTP 200 so the body is readable;
                 probes should inspect `status`)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from catalog_api import __version__
from catalog_api.database import ping_database
from catalog_api.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Exploring the Product Catalog API! Visit /api-docs for documentation."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    """
    Probe the database with SELECT 1 and report uptime.
    """
    connected = await ping_database()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
