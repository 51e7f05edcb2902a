"""Tests for the wordstream CLI."""

import json
import os
import sys
from unittest.mock import patch

import httpx
from typer.testing import CliRunner

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from wordstream.cli import app, render_trace
from wordstream.client.session import StreamSession
from wordstream.core.config import ConsumerSettings
from wordstream.core.http import create_http_client
from wordstream.domain.models import TraceKind

runner = CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})


def mock_client_factory(handler):
    def factory(settings):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=settings.base_url)
    return factory


def trace_lines(output):
    """Trace events printed by --json, one JSON object per line."""
    parsed = [json.loads(line) for line in output.splitlines() if line.startswith("{")]
    return [event for event in parsed if "kind" in event]


def words_then_done(request):
    return httpx.Response(200, content=b"abc\ndef\n[DONE]\n")


class TestWatchCommand:
    """Test suite for `wordstream watch`."""

    def test_json_trace_lines(self):
        with patch("wordstream.cli.create_http_client", mock_client_factory(words_then_done)):
            result = runner.invoke(app, ["watch", "2", "--json"])

        assert result.exit_code == 0
        events = trace_lines(result.output)
        assert [e["kind"] for e in events] == ["request", "response", "chunk", "complete"]

    def test_text_and_trace_table(self):
        with patch("wordstream.cli.create_http_client", mock_client_factory(words_then_done)):
            result = runner.invoke(app, ["watch", "2"])

        assert result.exit_code == 0
        assert "abc" in result.output
        assert "Stream finished." in result.output
        assert "REQUEST TRACE" in result.output
        assert "[COMPLETE]" in result.output

    def test_invalid_count_exits_nonzero(self):
        def unreachable(request):
            raise AssertionError("no request expected")

        with patch("wordstream.cli.create_http_client", mock_client_factory(unreachable)):
            result = runner.invoke(app, ["watch", "abc", "--json"])

        assert result.exit_code == 1
        events = trace_lines(result.output)
        assert [e["kind"] for e in events] == ["error"]

    def test_server_error_exits_nonzero(self):
        handler = lambda request: httpx.Response(500)
        with patch("wordstream.cli.create_http_client", mock_client_factory(handler)):
            result = runner.invoke(app, ["watch", "3"])

        assert result.exit_code == 1
        assert "Server error: 500" in result.output

    def test_malformed_url_exits_nonzero_without_traceback(self):
        def reject(request):
            raise httpx.InvalidURL("bad")

        with patch("wordstream.cli.create_http_client", mock_client_factory(reject)):
            result = runner.invoke(app, ["watch", "2", "--json"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, httpx.InvalidURL)
        events = trace_lines(result.output)
        assert [e["kind"] for e in events] == ["request", "error"]

    def test_url_option_overrides_base_url(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return words_then_done(request)

        with patch("wordstream.cli.create_http_client", mock_client_factory(handler)):
            runner.invoke(app, ["watch", "2", "--url", "http://streams.example:9000", "--json"])

        assert seen == ["http://streams.example:9000/stream?count=2"]


class TestCliMisc:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "wordstream 0.1.0" in result.output

    def test_render_trace_rows(self):
        session = StreamSession()
        session.trace(TraceKind.REQUEST, "GET /stream?count=1")
        session.trace(TraceKind.ERROR, "Server responded with 500")
        table = render_trace(session)
        assert table.row_count == 2

    def test_http_client_follows_consumer_settings(self):
        settings = ConsumerSettings(base_url="http://streams.example:9000", read_timeout=12.0)
        client = create_http_client(settings)
        assert client.base_url.host == "streams.example"
        assert client.base_url.port == 9000
        assert client.timeout.read == 12.0
        assert client.timeout.connect == settings.connect_timeout
