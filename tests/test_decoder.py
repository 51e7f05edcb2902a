"""Tests for the incremental stream decoder."""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from wordstream.client.decoder import StreamDecoder


class TestStreamDecoder:
    """Test suite for carry-over decoding and terminator detection."""

    def test_plain_chunk_passes_through(self):
        decoder = StreamDecoder()
        chunk = decoder.feed(b"abc\ndef\n")
        assert chunk.text == "abc\ndef\n"
        assert chunk.terminated is False

    def test_multibyte_character_split_across_reads(self):
        decoder = StreamDecoder()
        first = decoder.feed(b"caf\xc3")
        second = decoder.feed(b"\xa9\n")
        assert first.text == "caf"
        assert second.text == "é\n"

    def test_terminator_in_single_read(self):
        decoder = StreamDecoder()
        chunk = decoder.feed(b"[DONE]\n")
        assert chunk.text == ""
        assert chunk.terminated is True

    def test_text_before_terminator_is_kept(self):
        decoder = StreamDecoder()
        chunk = decoder.feed(b"abc\n[DONE]\n")
        assert chunk.text == "abc\n"
        assert chunk.terminated is True

    def test_terminator_split_across_reads(self):
        decoder = StreamDecoder()
        first = decoder.feed(b"abc\n[DO")
        assert first.text == "abc\n"
        assert first.terminated is False
        assert decoder.pending == "[DO"

        second = decoder.feed(b"NE]\n")
        assert second.text == ""
        assert second.terminated is True

    def test_terminator_split_one_byte_at_a_time(self):
        decoder = StreamDecoder()
        results = [decoder.feed(bytes([b])) for b in b"xy\n[DONE]\n"]
        visible = "".join(r.text for r in results)
        terminated_at = [i for i, r in enumerate(results) if r.terminated]
        assert visible == "xy\n"
        # Detected on the closing bracket, the byte that completes "[DONE]"
        assert terminated_at[0] == 8

    def test_false_prefix_is_released(self):
        """A held-back ``[D`` that turns out not to be the terminator is displayed."""
        decoder = StreamDecoder()
        first = decoder.feed(b"abc[D")
        second = decoder.feed(b"X\n")
        assert first.text == "abc"
        assert second.text == "[DX\n"
        assert second.terminated is False

    def test_input_after_terminator_is_ignored(self):
        decoder = StreamDecoder()
        decoder.feed(b"[DONE]\n")
        chunk = decoder.feed(b"late\n")
        assert chunk.text == ""
        assert chunk.terminated is True

    def test_flush_releases_held_prefix(self):
        decoder = StreamDecoder()
        decoder.feed(b"abc\n[DON")
        assert decoder.flush() == "[DON"

    def test_flush_replaces_truncated_sequence(self):
        decoder = StreamDecoder()
        decoder.feed(b"caf\xc3")
        assert decoder.flush() == "�"

    def test_flush_after_terminator_is_empty(self):
        decoder = StreamDecoder()
        decoder.feed(b"abc\n[DONE]\n")
        assert decoder.flush() == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
