"""Client-side stream consumer."""

from wordstream.client.consumer import StreamConsumer, validate_count
from wordstream.client.decoder import StreamDecoder
from wordstream.client.session import SessionListener, StreamSession

__all__ = [
    "SessionListener",
    "StreamConsumer",
    "StreamDecoder",
    "StreamSession",
    "validate_count",
]
