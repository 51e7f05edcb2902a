"""Streaming word endpoint."""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from wordstream.core.config import ProducerSettings, get_settings
from wordstream.producer.stream import WordStream, parse_count
from wordstream.producer.words import WordGenerator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stream"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "Transfer-Encoding": "chunked",
}


def get_producer_settings() -> ProducerSettings:
    return get_settings().producer


@router.get(
    "/stream",
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Newline-delimited words followed by a `[DONE]` line",
            "content": {"text/plain": {"example": "kqzv\nmrotbe\nuaw\n[DONE]\n"}},
        },
    },
    summary="Stream random words",
    description="Emit `count` random lowercase words, one line at a time with a fixed "
    "delay between them, then a `[DONE]` line. A count that is missing or not a plain "
    "run of digits falls back to the configured default.",
)
async def stream_words(
    count: str | None = Query(
        default=None,
        description="Number of words to emit.",
        examples=["12"],
    ),
    settings: ProducerSettings = Depends(get_producer_settings),
) -> StreamingResponse:
    resolved = parse_count(count)
    if resolved is None:
        if count is not None:
            logger.info("Unusable count %r, using default %d", count, settings.default_count)
        resolved = settings.default_count

    word_stream = WordStream(
        count=resolved,
        delay=settings.delay_seconds,
        next_word=WordGenerator(settings.min_word_length, settings.max_word_length),
    )
    return StreamingResponse(
        word_stream,
        media_type="text/plain",
        headers=STREAM_HEADERS,
    )
