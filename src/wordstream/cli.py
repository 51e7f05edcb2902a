"""wordstream CLI: Typer + Rich terminal interface.

Commands: serve, watch.
``watch`` is the presentation side of the consumer: it prints stream text as
it arrives and renders the trace with one color per event kind.
"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from wordstream import __version__
from wordstream.client.consumer import StreamConsumer
from wordstream.client.session import StreamSession
from wordstream.core.config import ConsumerSettings, get_settings
from wordstream.core.http import create_http_client
from wordstream.domain.models import SessionState, StreamOutcome, TraceEvent, TraceKind

console = Console()

app = typer.Typer(
    name="wordstream",
    help="Paced word streaming over chunked HTTP.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

KIND_STYLES = {
    TraceKind.REQUEST: "blue",
    TraceKind.RESPONSE: "yellow",
    TraceKind.CHUNK: "green",
    TraceKind.COMPLETE: "magenta",
    TraceKind.ERROR: "red",
}


class ConsoleListener:
    """Echo stream text to the terminal as it arrives."""

    def __init__(self, out: Console) -> None:
        self._out = out

    def on_text_appended(self, text: str) -> None:
        self._out.print(text, end="", style="green", markup=False, highlight=False)

    def on_trace_event(self, event: TraceEvent) -> None:
        pass

    def on_session_state_changed(self, state: SessionState) -> None:
        pass


class JsonLinesListener:
    """Emit each trace event as one JSON object per line."""

    def on_text_appended(self, text: str) -> None:
        pass

    def on_trace_event(self, event: TraceEvent) -> None:
        typer.echo(json.dumps(event.to_dict()))

    def on_session_state_changed(self, state: SessionState) -> None:
        pass


def render_trace(session: StreamSession) -> Table:
    """Build the REQUEST TRACE table for a finished session."""
    table = Table(title="REQUEST TRACE", show_lines=False, expand=False)
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Message")

    for event in session.events:
        style = KIND_STYLES[event.kind]
        table.add_row(
            event.format_time(),
            Text(f"[{event.kind.value.upper()}]", style=f"bold {style}"),
            Text(event.message, style=style),
        )
    return table


async def _run_session(count: str, settings: ConsumerSettings, listener) -> StreamSession:
    async with create_http_client(settings) as client:
        consumer = StreamConsumer.from_settings(client, settings, listener=listener)
        return await consumer.start(count)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"wordstream {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Paced word streaming over chunked HTTP."""


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default from settings)."),
    log_level: str = typer.Option(None, "--log-level", help="Log level, e.g. info or debug."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes."),
) -> None:
    """Run the stream producer under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "wordstream.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=(log_level or settings.log_level).lower(),
        reload=reload,
    )


@app.command()
def watch(
    count: str = typer.Argument(..., help="Number of words to request."),
    url: str = typer.Option(None, "--url", "-u", help="Server base URL (default from settings)."),
    json_output: bool = typer.Option(False, "--json", help="Print trace events as JSON lines."),
    strict: bool = typer.Option(
        None, "--strict/--lenient",
        help="Fail when the body ends without the terminator line (default from settings).",
    ),
) -> None:
    """Stream words from a running server and show the request trace."""
    updates: dict[str, object] = {}
    if url:
        updates["base_url"] = url
    if strict is not None:
        updates["strict_termination"] = strict
    settings = get_settings().consumer.model_copy(update=updates)

    listener = JsonLinesListener() if json_output else ConsoleListener(console)
    session = asyncio.run(_run_session(count, settings, listener))

    if not json_output:
        console.print()
        console.print(render_trace(session))
        if session.outcome is StreamOutcome.UNTERMINATED:
            console.print("Stream closed without a [DONE] line.", style="yellow", markup=False)

    if session.state is SessionState.FAILED:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
