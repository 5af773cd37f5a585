"""Pytest configuration and shared fixtures for zoom-client tests."""

import pytest

from zoom_client import ZoomClient
from zoom_client.auth import CredentialResolver
from zoom_client.testing import MOCK_CREDENTIALS, ZoomMockRouter


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Zoom and test-related environment variables before each test.

    This prevents test pollution when testing credential resolution.
    """
    import os

    test_prefixes = ("ZOOM_", "TEST_", "API_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def resolver():
    """Resolver that ignores any .env file on the machine running the tests."""
    return CredentialResolver(load_dotenv=False)


@pytest.fixture
def router():
    return ZoomMockRouter()


@pytest.fixture
def make_client(router, resolver):
    """Build a ZoomClient wired to the mock router."""
    clients = []

    def factory(**kwargs):
        options = {**MOCK_CREDENTIALS, "resolver": resolver, "transport": router.transport(), **kwargs}
        client = ZoomClient(**options)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
