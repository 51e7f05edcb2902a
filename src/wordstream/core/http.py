import httpx

from wordstream.core.config import ConsumerSettings, get_settings


def create_http_client(settings: ConsumerSettings | None = None) -> httpx.AsyncClient:
    """Build the client used by the stream consumer.

    The read timeout bounds the gap between two chunks, not the whole body.
    """
    settings = settings or get_settings().consumer
    timeout = httpx.Timeout(
        connect=settings.connect_timeout,
        read=settings.read_timeout,
        write=10.0,
        pool=5.0,
    )
    limits = httpx.Limits(max_connections=10, max_keepalive_connections=5, keepalive_expiry=30.0)
    return httpx.AsyncClient(base_url=settings.base_url, timeout=timeout, limits=limits)
