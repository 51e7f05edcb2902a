"""wordstream: paced word streaming over chunked HTTP, with a tracing client."""

__version__ = "0.1.0"
