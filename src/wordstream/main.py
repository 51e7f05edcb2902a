"""
wordstream - paced word streaming over chunked HTTP.

Application entry point. Configures middleware, registers routes,
and manages the application lifespan (startup/shutdown).
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from prometheus_client import make_asgi_app

from wordstream import __version__
from wordstream.api.routes.health import router as health_router
from wordstream.api.routes.metrics import router as metrics_router
from wordstream.api.v1.stream import router as stream_router
from wordstream.core.config import get_settings
from wordstream.core.logging_config import configure_logging
from wordstream.middleware.trace import TraceMiddleware

# Configure logging with trace ID injection before anything else
configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    app.state.start_time = time.time()
    settings = get_settings()

    logger.info(
        "wordstream started (version %s, env=%s, default_count=%d, delay=%.3fs)",
        __version__,
        settings.wordstream_env,
        settings.producer.default_count,
        settings.producer.delay_seconds,
    )
    yield
    logger.info("wordstream shutdown complete")


app = FastAPI(
    title="wordstream",
    description=(
        "Streams randomly generated words over a chunked text/plain response, "
        "one line at a time at a fixed cadence, terminated by a `[DONE]` line."
    ),
    version=__version__,
    openapi_tags=[
        {
            "name": "Stream",
            "description": "Paced newline-delimited word streams.",
        },
        {
            "name": "Operations",
            "description": "Health checks, metrics, and operational monitoring.",
        },
    ],
    lifespan=lifespan,
)

# Middleware: last added is outermost (first to execute on request)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)
app.add_middleware(TraceMiddleware)

app.include_router(stream_router)

# Operational routes
app.include_router(health_router)
app.include_router(metrics_router)

metrics_app = make_asgi_app()
app.mount("/prometheus", metrics_app)


@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    """Redirect root to the API docs."""
    return RedirectResponse(url="/docs")
