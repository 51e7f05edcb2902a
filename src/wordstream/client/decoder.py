"""
Incremental body decoder with carry-over between reads.

Physical reads can split a multi-byte character or the terminator. The
decoder keeps undecoded trailing bytes in the codec state and holds back any
decoded suffix that could be the start of the terminator, so the terminator
is found on the cumulative text and never leaks into the visible output.
"""

import codecs

from wordstream.domain.models import TERMINATOR, DecodedChunk


def _partial_marker_length(text: str, marker: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``marker``."""
    for size in range(min(len(text), len(marker) - 1), 0, -1):
        if text.endswith(marker[:size]):
            return size
    return 0


class StreamDecoder:
    """Stateful bytes-to-text decoder for one stream body."""

    def __init__(self, encoding: str = "utf-8", terminator: str = TERMINATOR):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._terminator = terminator
        self._held = ""
        self.terminated = False

    @property
    def pending(self) -> str:
        """Decoded text held back because it may begin the terminator."""
        return self._held

    def feed(self, data: bytes) -> DecodedChunk:
        """Decode one physical read.

        Returns the text that is now safe to display. Once the terminator has
        been seen, further input is ignored.
        """
        if self.terminated:
            return DecodedChunk(text="", terminated=True)

        text = self._held + self._decoder.decode(data)
        index = text.find(self._terminator)
        if index != -1:
            self.terminated = True
            self._held = ""
            return DecodedChunk(text=text[:index], terminated=True)

        held = _partial_marker_length(text, self._terminator)
        self._held = text[len(text) - held:] if held else ""
        return DecodedChunk(text=text[:len(text) - held])

    def flush(self) -> str:
        """Release everything still buffered at end of body.

        An incomplete trailing byte sequence becomes U+FFFD.
        """
        if self.terminated:
            return ""
        text = self._held + self._decoder.decode(b"", final=True)
        self._held = ""
        return text
