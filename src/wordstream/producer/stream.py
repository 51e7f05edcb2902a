"""
Paced word emission for one streaming response.

Each request gets its own ``WordStream``; nothing is shared between streams
except process-wide counters.
"""

import asyncio
import logging
import re
import time
from collections.abc import AsyncIterator, Callable

from wordstream.core import telemetry
from wordstream.core.config import get_settings
from wordstream.core.metrics import metrics, stream_metrics
from wordstream.domain.models import TERMINATOR_LINE
from wordstream.producer.words import WordGenerator

logger = logging.getLogger(__name__)


_COUNT_PATTERN = re.compile(r"\d+", re.ASCII)


def parse_count(raw: str | None) -> int | None:
    """Parse a ``count`` query value, or ``None`` when the caller should use its default.

    Only a plain run of ASCII digits is accepted: signs, separators and
    non-ASCII digits are unusable, so negatives are too.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not _COUNT_PATTERN.fullmatch(text):
        return None
    return int(text)


class WordStream:
    """Async byte source: ``count`` word lines, paced by ``delay``, then the terminator.

    ``delay`` defaults to the configured ``STREAM_DELAY_SECONDS``.
    """

    def __init__(
        self,
        count: int,
        delay: float | None = None,
        next_word: Callable[[], str] | None = None,
    ):
        if count < 0:
            raise ValueError("count must be non-negative")
        self.count = count
        self.delay = get_settings().producer.delay_seconds if delay is None else delay
        self._next_word = next_word or WordGenerator()
        self.emitted = 0

    async def __aiter__(self) -> AsyncIterator[bytes]:
        start = time.perf_counter()
        completed = False
        reason = "client disconnected"

        stream_metrics.stream_started()
        metrics.increment("streams_started")
        metrics.increment("active_streams")
        telemetry.log_stream_started(self.count, self.delay)

        try:
            for _ in range(self.count):
                line = (self._next_word() + "\n").encode("utf-8")
                self.emitted += 1
                stream_metrics.word_emitted()
                metrics.increment("words_emitted")
                yield line
                await asyncio.sleep(self.delay)
            yield TERMINATOR_LINE.encode("utf-8")
            completed = True
        except asyncio.CancelledError:
            # Starlette cancels the body task when it sees http.disconnect
            reason = "cancelled"
            raise
        except GeneratorExit:
            # A failed send abandons the iterator; it is closed without resuming
            reason = "closed before terminator"
            raise
        finally:
            if not completed:
                logger.info("Stream ended after %d/%d words (%s)", self.emitted, self.count, reason)
            elapsed = time.perf_counter() - start
            metrics.decrement("active_streams")
            metrics.observe("stream_duration_seconds", elapsed)
            if completed:
                metrics.increment("streams_completed")
                stream_metrics.stream_finished("completed", elapsed)
                telemetry.log_stream_completed(self.emitted, elapsed)
            else:
                metrics.increment("streams_aborted")
                stream_metrics.stream_finished("aborted", elapsed)
                telemetry.log_stream_aborted(self.emitted, self.count, elapsed, reason)
