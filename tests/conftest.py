"""
Test configuration and fixtures for the link stats service.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import app
from linkstats_app.cache.strategies import InMemoryUrlCache
from linkstats_app.dependencies import get_cache, get_storage
from linkstats_app.schemas.analytics import ClickEvent
from linkstats_app.storage.strategies import InMemoryStorage

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
FIREFOX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


def make_event(short_code="abc123", timestamp="2024-01-15T10:05:00Z", **fields):
    """Build a click event with sensible defaults for aggregation tests"""
    if isinstance(timestamp, str):
        timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    return ClickEvent(short_code=short_code, timestamp=timestamp, **fields)


@pytest.fixture(scope="function")
def storage():
    """Fresh in-memory storage for each test, so tests stay isolated."""
    return InMemoryStorage()


@pytest.fixture(scope="function")
def cache():
    return InMemoryUrlCache()


@pytest.fixture(scope="function")
def client(storage, cache):
    """
    Create a test client with storage and cache dependencies overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_cache] = lambda: cache

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
