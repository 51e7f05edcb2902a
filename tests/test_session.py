"""Tests for StreamSession bookkeeping."""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from wordstream.client.session import StreamSession
from wordstream.domain.models import SessionState, StreamOutcome, TraceKind


class RecordingListener:
    def __init__(self):
        self.calls = []

    def on_text_appended(self, text):
        self.calls.append(("text", text))

    def on_trace_event(self, event):
        self.calls.append(("trace", event.kind))

    def on_session_state_changed(self, state):
        self.calls.append(("state", state))


def stepping_clock(*offsets_ms):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    times = iter(base + timedelta(milliseconds=ms) for ms in offsets_ms)
    return lambda: next(times)


class TestStreamSession:
    """Test suite for trace recording and lifecycle."""

    def test_new_session_is_idle(self):
        session = StreamSession()
        assert session.state == SessionState.IDLE
        assert session.active is False
        assert session.events == []
        assert session.text == ""

    def test_default_clock_is_utc(self):
        event = StreamSession().trace(TraceKind.REQUEST, "GET /stream?count=1")
        assert event.timestamp.tzinfo is timezone.utc

    def test_terminal_traced(self):
        session = StreamSession()
        assert session.terminal_traced is False
        session.trace(TraceKind.REQUEST, "GET /stream?count=1")
        assert session.terminal_traced is False
        session.trace(TraceKind.ERROR, "Server responded with 500")
        assert session.terminal_traced is True

    def test_trace_preserves_order(self):
        session = StreamSession()
        session.trace(TraceKind.REQUEST, "GET /stream?count=1")
        session.trace(TraceKind.RESPONSE, "200 OK")
        session.trace(TraceKind.COMPLETE, "done")
        assert session.kinds == [TraceKind.REQUEST, TraceKind.RESPONSE, TraceKind.COMPLETE]

    def test_timestamps_never_go_backwards(self):
        session = StreamSession(clock=stepping_clock(0, 50, 20, 80))
        for _ in range(4):
            session.trace(TraceKind.CHUNK, "x")
        stamps = [event.timestamp for event in session.events]
        assert stamps == sorted(stamps)
        # The backwards step is clamped to the previous event's time
        assert stamps[2] == stamps[1]

    def test_content_and_status_text_are_separated(self):
        session = StreamSession()
        session.append_text("abc\n", content=True)
        session.append_text("\nStream finished.")
        assert session.text == "abc\n\nStream finished."
        assert session.received == "abc\n"
        assert session.words == ["abc"]

    def test_empty_text_is_not_announced(self):
        listener = RecordingListener()
        session = StreamSession(listener=listener)
        session.append_text("")
        assert listener.calls == []

    def test_listener_sees_lifecycle_in_order(self):
        listener = RecordingListener()
        session = StreamSession(listener=listener)
        session.begin()
        session.transition(SessionState.REQUESTING)
        session.trace(TraceKind.REQUEST, "GET")
        session.append_text("abc\n", content=True)
        session.finish(SessionState.COMPLETED, StreamOutcome.COMPLETED)

        assert listener.calls == [
            ("state", SessionState.VALIDATING),
            ("state", SessionState.REQUESTING),
            ("trace", TraceKind.REQUEST),
            ("text", "abc\n"),
            ("state", SessionState.COMPLETED),
            ("state", SessionState.IDLE),
        ]

    def test_finish_keeps_terminal_state_and_deactivates(self):
        session = StreamSession()
        session.begin()
        assert session.active is True
        session.finish(SessionState.FAILED, StreamOutcome.TRANSPORT_ERROR)
        assert session.active is False
        assert session.state == SessionState.FAILED
        assert session.state.is_terminal
        assert session.outcome == StreamOutcome.TRANSPORT_ERROR

    def test_event_serializes(self):
        session = StreamSession(clock=stepping_clock(0))
        event = session.trace(TraceKind.ERROR, "boom")
        assert event.to_dict() == {
            "timestamp": "2024-01-01T00:00:00+00:00",
            "kind": "error",
            "message": "boom",
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
