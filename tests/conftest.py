"""
Global pytest fixtures for the shorturl test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory Storage fixture for direct testing
    - Provide a UrlManager fixture wired to the Storage fixture

Using `create_app(storage=...)` gives each test its own in-memory state,
so ids always start at 1 and tests never see each other's records.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shorturl.manager.url_manager import UrlManager
from shorturl.storage.storage import Storage


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def manager(storage: Storage) -> UrlManager:
    """Provide a UrlManager wired to the storage fixture."""
    return UrlManager(storage=storage)


@pytest.fixture
def client(storage: Storage) -> TestClient:
    """
    Provide a TestClient over a new app instance sharing the storage fixture.

    Entering the client runs the app lifespan (schema creation).
    """
    app = create_app(storage=storage)
    with TestClient(app) as test_client:
        yield test_client
