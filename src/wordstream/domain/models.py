"""
Transport-level domain models shared by the producer and the consumer.

No external dependencies - only Python standard library.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# In-band end-of-stream marker. Tokens are lowercase letters, so it never
# collides with content.
TERMINATOR = "[DONE]"
TERMINATOR_LINE = TERMINATOR + "\n"


def _utc_now() -> datetime:
    """Helper function for UTC now."""
    return datetime.now(timezone.utc)


class TraceKind(str, Enum):
    """Classification of a transport-level occurrence."""
    REQUEST = "request"
    RESPONSE = "response"
    CHUNK = "chunk"
    COMPLETE = "complete"
    ERROR = "error"


class SessionState(str, Enum):
    """Lifecycle of one consumer session."""
    IDLE = "idle"
    VALIDATING = "validating"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED)


class StreamOutcome(str, Enum):
    """How a session ended, for diagnostics."""
    COMPLETED = "completed"            # terminator observed
    UNTERMINATED = "unterminated"      # body closed before the terminator
    TRANSPORT_ERROR = "transport_error"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class TraceEvent:
    """One observed occurrence. Frozen so the recorded trace cannot be rewritten."""
    kind: TraceKind
    message: str
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind.value,
            "message": self.message,
        }

    def format_time(self) -> str:
        """Wall-clock time with millisecond precision, e.g. ``14:03:07.215``."""
        return self.timestamp.astimezone().strftime("%H:%M:%S.%f")[:-3]


@dataclass(frozen=True)
class DecodedChunk:
    """Text made visible by one physical read, and whether the terminator was seen."""
    text: str
    terminated: bool = False
