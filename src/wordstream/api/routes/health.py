"""
Health check endpoint.

The service has no external dependencies, so it is healthy whenever it can
answer; the payload reports uptime and how many streams are in flight.
"""

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from wordstream import __version__
from wordstream.api.schemas.health import HealthResponse
from wordstream.core.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Operations"])


@router.get("/health", summary="System health check")
async def health_check(request: Request) -> HealthResponse:
    start_time = getattr(request.app.state, "start_time", time.time())
    uptime_seconds = round(time.time() - start_time, 1)

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC),
        uptime_seconds=uptime_seconds,
        active_streams=max(metrics.gauge("active_streams"), 0),
    )
