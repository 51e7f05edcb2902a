"""
Request tracing and metrics middleware.

Assigns a trace ID to every request, measures time to response headers and
tracks request metrics. For /stream the measured time ends when the body
starts, not when the last word is written.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from wordstream.core.context import reset_request_id, set_request_id
from wordstream.core.metrics import metrics

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE = "<unmatched>"


def route_label(request: Request) -> str:
    """Label a request by the route template it hits.

    Paths that match no route share one label, so ``requests_by_endpoint``
    holds at most one key per registered route.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return route.path
    return UNMATCHED_ROUTE


class TraceMiddleware(BaseHTTPMiddleware):
    """Middleware that handles request tracing and metrics collection.

    On every incoming request:
    - Echoes the caller's X-Request-ID or generates one.
    - Binds it to the ContextVar for the request, and unbinds it afterwards.
    - Counts the request under its route template and tracks active requests.
    - Adds X-Request-ID and X-Response-Time to the response headers.
    """

    async def dispatch(self, request: Request, call_next: ...) -> Response:
        """Trace, time and count one request."""
        # Reuse the caller's trace ID so client and server logs line up
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = set_request_id(request_id)
        endpoint = route_label(request)

        metrics.increment("active_requests")
        metrics.increment("requests_total")
        metrics.increment_dict("requests_by_endpoint", endpoint)

        # Time to headers; a streaming body is still being written afterwards
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            metrics.decrement("active_requests")
            reset_request_id(token)
            raise

        elapsed = time.perf_counter() - start
        elapsed_ms = round(elapsed * 1000, 2)

        metrics.decrement("active_requests")
        metrics.observe("response_time_seconds", elapsed)
        metrics.increment_dict("requests_by_status", str(response.status_code))

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"

        logger.info(
            "%s %s [%s] -> %d (%.2fms)",
            request.method,
            request.url.path,
            endpoint,
            response.status_code,
            elapsed_ms,
        )
        reset_request_id(token)

        return response
