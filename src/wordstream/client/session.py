"""
Client-held state for one streaming exchange.

A ``StreamSession`` owns the display buffer, the trace and the lifecycle
state. The consumer mutates it; a ``SessionListener`` observes it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from wordstream.domain.models import SessionState, StreamOutcome, TraceEvent, TraceKind, _utc_now


class SessionListener(Protocol):
    """Presentation hooks. Called synchronously, in observation order."""

    def on_text_appended(self, text: str) -> None: ...

    def on_trace_event(self, event: TraceEvent) -> None: ...

    def on_session_state_changed(self, state: SessionState) -> None: ...


@dataclass
class StreamSession:
    """Display text, received stream text, trace and state of one session."""
    listener: SessionListener | None = None
    clock: Callable[[], datetime] = _utc_now
    text: str = ""
    received: str = ""
    events: list[TraceEvent] = field(default_factory=list)
    state: SessionState = SessionState.IDLE
    outcome: StreamOutcome | None = None
    active: bool = False

    @property
    def kinds(self) -> list[TraceKind]:
        return [event.kind for event in self.events]

    @property
    def terminal_traced(self) -> bool:
        """True once a complete or error event has been recorded."""
        return bool(self.events) and self.events[-1].kind in (TraceKind.COMPLETE, TraceKind.ERROR)

    @property
    def words(self) -> list[str]:
        """Tokens received so far, in arrival order."""
        return self.received.split()

    def transition(self, state: SessionState) -> None:
        self.state = state
        if self.listener is not None:
            self.listener.on_session_state_changed(state)

    def trace(self, kind: TraceKind, message: str) -> TraceEvent:
        """Append a trace event.

        Timestamps never go backwards within a session, even if the clock does.
        """
        timestamp = self.clock()
        if self.events and timestamp < self.events[-1].timestamp:
            timestamp = self.events[-1].timestamp
        event = TraceEvent(kind=kind, message=message, timestamp=timestamp)
        self.events.append(event)
        if self.listener is not None:
            self.listener.on_trace_event(event)
        return event

    def append_text(self, text: str, *, content: bool = False) -> None:
        """Append to the display buffer. ``content`` marks stream text as opposed to status lines."""
        if not text:
            return
        self.text += text
        if content:
            self.received += text
        if self.listener is not None:
            self.listener.on_text_appended(text)

    def begin(self) -> None:
        self.active = True
        self.transition(SessionState.VALIDATING)

    def finish(self, state: SessionState, outcome: StreamOutcome) -> None:
        """Record the terminal state, then hand the consumer back to idle."""
        self.outcome = outcome
        self.transition(state)
        self.active = False
        if self.listener is not None:
            self.listener.on_session_state_changed(SessionState.IDLE)
