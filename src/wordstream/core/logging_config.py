"""
Logging configuration for wordstream.

Every log line carries the trace ID of the request that produced it, so the
lines written by a long-running stream can be tied back to its request.
"""

import logging

from wordstream.core.context import get_request_id

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Logging filter that injects the request trace ID into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()  # type: ignore[attr-defined]
        return True


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a single console handler on the root logger.

    Safe to call repeatedly: existing root handlers are replaced, not stacked.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler.addFilter(RequestIdFilter())

    root_logger.addHandler(console_handler)
