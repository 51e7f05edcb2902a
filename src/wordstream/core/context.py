"""
Request-scoped context for log correlation.

The trace ID set by the middleware is visible to the streaming generator
because Starlette runs the response body inside the request's context copy.
"""

from contextvars import ContextVar, Token

NO_TRACE = "no-trace"

request_id_var: ContextVar[str] = ContextVar("request_id", default=NO_TRACE)


def get_request_id() -> str:
    """Return the trace ID of the request being served, or ``no-trace``."""
    return request_id_var.get()


def set_request_id(request_id: str) -> Token[str]:
    """Bind a trace ID to the current context and return the reset token."""
    return request_id_var.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    request_id_var.reset(token)
