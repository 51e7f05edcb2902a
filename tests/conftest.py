"""Pytest configuration for wordstream tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from wordstream.api.v1.stream import get_producer_settings
from wordstream.core.config import ProducerSettings
from wordstream.main import app


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def fast_stream():
    """Serve /stream with no pacing delay so tests do not sleep."""
    app.dependency_overrides[get_producer_settings] = lambda: ProducerSettings(delay_seconds=0.0)
    yield app
    app.dependency_overrides.pop(get_producer_settings, None)
