"""
Metrics endpoint.

Returns all collected in-memory metrics as a JSON snapshot including
request counts, response time percentiles and stream counters.
"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Request

from wordstream.api.schemas.health import ResetResponse
from wordstream.core.metrics import get_metrics, metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Operations"])


@router.post("/metrics/reset", summary="Reset all stats")
async def reset_stats(request: Request) -> ResetResponse:
    """Reset counters and uptime. Streams still in flight stay counted as active."""
    metrics.reset()
    request.app.state.start_time = time.time()
    logger.info("Metrics reset")
    return ResetResponse(status="ok", message="Stats reset")


@router.get("/metrics", summary="Operational metrics")
async def metrics_endpoint() -> dict[str, Any]:
    """Return all collected metrics as a JSON snapshot.

    Includes:
    - Request counts (total, by status, by endpoint, active)
    - Performance percentiles (avg, p50, p95, p99)
    - Stream counters (started, completed, aborted, active, words emitted)
    """
    return get_metrics()
