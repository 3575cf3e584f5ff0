"""
Basecamp Backend — Health Check Route
=======================================

What:  Liveness endpoint for container probes and load balancers.
How:   Returns uptime, the current UTC timestamp and database reachability
       inside the standard envelope.
Who:   Docker health checks, load balancers, uptime monitors.

Mounted twice by main.py:
    GET /api/v1/health   (documented)
    GET /health          (probe alias, hidden from the OpenAPI schema)

Status levels:
    ok:       database reachable
    degraded: process is up, database ping failed (still HTTP 200)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from basecamp import __version__
from basecamp.config import settings
from basecamp.database import ping_database
from basecamp.schemas.envelope import APIResponse, ErrorResponse, HealthData
from basecamp.utils.async_handler import async_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _start_time, 2)


@router.get(
    "/health",
    response_model=APIResponse[HealthData],
    responses={500: {"model": ErrorResponse}},
    summary="Service health check",
)
@async_handler
async def health_check() -> APIResponse[HealthData]:
    database_up = await ping_database()

    return APIResponse[HealthData](
        status_code=200,
        message="OK",
        data=HealthData(
            status="ok" if database_up else "degraded",
            uptime=uptime_seconds(),
            timestamp=datetime.now(timezone.utc),
            database="connected" if database_up else "disconnected",
            environment=settings.environment,
            version=__version__,
        ),
    )
