"""
Stream consumer: one validated request, an incremental read loop, a trace.

State machine per session::

    idle -> validating -> requesting -> streaming -> completed | failed -> idle

Validation failures never reach the network. Every failure is terminal for
the session; nothing is retried.
"""

import logging
from collections.abc import Callable
from datetime import datetime

import httpx

from wordstream.client.decoder import StreamDecoder
from wordstream.client.session import SessionListener, StreamSession
from wordstream.core import telemetry
from wordstream.core.config import ConsumerSettings
from wordstream.domain.exceptions import MalformedStreamEndError, TransportError, ValidationError
from wordstream.domain.models import SessionState, StreamOutcome, TraceKind

logger = logging.getLogger(__name__)

INVALID_INPUT_TEXT = "Please enter a valid positive number."
FINISHED_TEXT = "\nStream finished."
SNIPPET_LIMIT = 60


def validate_count(raw: str | int | None) -> int:
    """Parse user input into a positive item count or raise ``ValidationError``."""
    if raw is None:
        raise ValidationError("number is required", value=raw)
    if isinstance(raw, bool):
        raise ValidationError("number must be an integer", value=raw)
    if isinstance(raw, int):
        count = raw
    else:
        text = raw.strip()
        if not text:
            raise ValidationError("number is required", value=raw)
        try:
            count = int(text)
        except ValueError:
            raise ValidationError("not a number", value=raw) from None
    if count <= 0:
        raise ValidationError("number must be positive", value=raw)
    return count


def _snippet(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        return text.encode("unicode_escape").decode("ascii")
    if len(stripped) > SNIPPET_LIMIT:
        return stripped[:SNIPPET_LIMIT] + "..."
    return stripped


class StreamConsumer:
    """Runs streaming sessions against a word stream endpoint.

    Only one session is active at a time; ``start`` while one is running
    returns the running session untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        path: str = "/stream",
        listener: SessionListener | None = None,
        strict_termination: bool = False,
        clock: Callable[[], datetime] | None = None,
    ):
        self._client = client
        self._path = path
        self._listener = listener
        self._strict_termination = strict_termination
        self._clock = clock
        self._session: StreamSession | None = None

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient,
        settings: ConsumerSettings,
        listener: SessionListener | None = None,
    ) -> "StreamConsumer":
        return cls(
            client,
            path=settings.stream_path,
            listener=listener,
            strict_termination=settings.strict_termination,
        )

    @property
    def session(self) -> StreamSession | None:
        """The most recent session, active or finished."""
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None or not self._session.active:
            return SessionState.IDLE
        return self._session.state

    def _new_session(self) -> StreamSession:
        if self._clock is not None:
            return StreamSession(listener=self._listener, clock=self._clock)
        return StreamSession(listener=self._listener)

    async def start(self, raw_count: str | int | None) -> StreamSession:
        """Run one full session and return it once it is no longer active."""
        if self._session is not None and self._session.active:
            logger.info("Stream already in progress; start ignored")
            return self._session

        session = self._new_session()
        self._session = session
        session.begin()

        try:
            count = validate_count(raw_count)
        except ValidationError as e:
            session.append_text(INVALID_INPUT_TEXT)
            session.trace(TraceKind.ERROR, f"Invalid input: {e.message}")
            self._finish(session, SessionState.FAILED, StreamOutcome.INVALID_INPUT, e)
            return session

        session.transition(SessionState.REQUESTING)
        session.trace(TraceKind.REQUEST, f"GET {self._path}?count={count}")

        try:
            outcome = await self._exchange(session, count)
        except TransportError as e:
            if isinstance(e, MalformedStreamEndError):
                failed_outcome = StreamOutcome.UNTERMINATED
            else:
                failed_outcome = StreamOutcome.TRANSPORT_ERROR
            self._fail(session, e.message, failed_outcome, e, status_code=e.status_code)
        except Exception as e:
            # e.g. a listener callback raising mid-stream
            logger.exception("Stream session aborted by unexpected error")
            self._fail(session, str(e) or type(e).__name__, StreamOutcome.TRANSPORT_ERROR, e)
        else:
            session.append_text(FINISHED_TEXT)
            self._finish(session, SessionState.COMPLETED, outcome)
        finally:
            if session.active:
                # Reached only when the failure handling itself raised.
                session.finish(SessionState.FAILED, StreamOutcome.TRANSPORT_ERROR)
        return session

    async def _exchange(self, session: StreamSession, count: int) -> StreamOutcome:
        try:
            async with self._client.stream("GET", self._path, params={"count": count}) as response:
                if not response.is_success:
                    raise TransportError(
                        f"Server responded with {response.status_code}",
                        status_code=response.status_code,
                    )
                session.transition(SessionState.STREAMING)
                session.trace(
                    TraceKind.RESPONSE,
                    f"{response.status_code} {response.reason_phrase} - Stream started",
                )
                return await self._read_body(session, response)
        except (httpx.HTTPError, httpx.StreamError, httpx.InvalidURL) as e:
            raise TransportError(
                str(e) or type(e).__name__,
                details={"error_type": type(e).__name__},
            ) from e

    async def _read_body(self, session: StreamSession, response: httpx.Response) -> StreamOutcome:
        decoder = StreamDecoder()
        async for data in response.aiter_bytes():
            decoded = decoder.feed(data)
            self._deliver(session, decoded.text)
            if decoded.terminated:
                session.trace(TraceKind.COMPLETE, "Stream completed")
                return StreamOutcome.COMPLETED

        self._deliver(session, decoder.flush())
        if self._strict_termination:
            raise MalformedStreamEndError(
                "Stream closed without terminator",
                received_chars=len(session.received),
            )
        logger.warning("Stream closed without terminator after %d chars", len(session.received))
        session.trace(TraceKind.COMPLETE, "Stream closed without terminator")
        return StreamOutcome.UNTERMINATED

    def _deliver(self, session: StreamSession, text: str) -> None:
        if not text:
            return
        session.append_text(text, content=True)
        session.trace(TraceKind.CHUNK, f'Received: "{_snippet(text)}"')

    def _fail(
        self,
        session: StreamSession,
        message: str,
        outcome: StreamOutcome,
        error: Exception,
        status_code: int | None = None,
    ) -> None:
        if not session.terminal_traced:
            session.trace(TraceKind.ERROR, message)
        if session.state is SessionState.STREAMING:
            session.append_text(f"\nStream failed: {message}")
        elif status_code is not None:
            session.append_text(f"Server error: {status_code}")
        else:
            session.append_text(f"Request failed: {message}")
        self._finish(session, SessionState.FAILED, outcome, error)

    def _finish(
        self,
        session: StreamSession,
        state: SessionState,
        outcome: StreamOutcome,
        error: Exception | None = None,
    ) -> None:
        session.finish(state, outcome)
        telemetry.log_session_finished(outcome.value, len(session.events), len(session.received), error)
