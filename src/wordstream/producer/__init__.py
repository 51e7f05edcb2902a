"""Server-side word stream producer."""

from wordstream.producer.stream import WordStream, parse_count
from wordstream.producer.words import WordGenerator

__all__ = ["WordGenerator", "WordStream", "parse_count"]
