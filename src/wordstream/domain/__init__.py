"""wordstream domain layer."""

from wordstream.domain.models import (
    TERMINATOR,
    TERMINATOR_LINE,
    DecodedChunk,
    SessionState,
    StreamOutcome,
    TraceEvent,
    TraceKind,
)

from wordstream.domain.exceptions import (
    WordStreamError,
    ValidationError,
    TransportError,
    MalformedStreamEndError,
)

__all__ = [
    # Models
    "TERMINATOR",
    "TERMINATOR_LINE",
    "DecodedChunk",
    "SessionState",
    "StreamOutcome",
    "TraceEvent",
    "TraceKind",
    # Exceptions
    "WordStreamError",
    "ValidationError",
    "TransportError",
    "MalformedStreamEndError",
]
