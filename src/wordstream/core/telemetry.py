"""
Structured lifecycle events for streams and client sessions.

Logs METADATA only - word content never reaches the log.
"""

import sys

import structlog

from wordstream.core.context import get_request_id


def _add_request_id(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("request_id", get_request_id())
    return event_dict


structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        _add_request_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    # stderr keeps stdout clean for `wordstream watch --json`
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

logger = structlog.get_logger("wordstream.telemetry")


def log_stream_started(count: int, delay_seconds: float) -> None:
    logger.info("stream_started", count=count, delay_seconds=delay_seconds)


def log_stream_completed(words: int, duration_seconds: float) -> None:
    logger.info(
        "stream_completed",
        words=words,
        duration_ms=round(duration_seconds * 1000, 2),
    )


def log_stream_aborted(words: int, requested: int, duration_seconds: float, reason: str) -> None:
    """Log a stream whose client went away before the terminator was written."""
    logger.warning(
        "stream_aborted",
        words=words,
        requested=requested,
        duration_ms=round(duration_seconds * 1000, 2),
        reason=reason,
    )


def log_session_finished(
    outcome: str,
    events: int,
    received_chars: int,
    error: Exception | None = None,
) -> None:
    log_data = {
        "outcome": outcome,
        "events": events,
        "received_chars": received_chars,
    }
    if error is not None:
        log_data["error_type"] = type(error).__name__
        log_data["error_message"] = str(error)
        logger.warning("session_finished", **log_data)
    else:
        logger.info("session_finished", **log_data)
