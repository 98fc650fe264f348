"""
Music Vote Manager - Pytest Configuration & Shared Fixtures

Provides reusable fixtures for:
- Resetting the in-memory store around every test
- A fresh FastAPI application per test
- Anonymous and logged-in TestClient instances
- Mock requests / responses for exercising auth helpers directly
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from musicvote import store
from musicvote.main import create_app

DEMO_USERNAME = "user1"
DEMO_PASSWORD = "password123"


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_store():
    """Start and finish every test with the demo data loaded."""
    store.reset_demo_data()
    yield
    store.reset_demo_data()


# ---------------------------------------------------------------------------
# Application / client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    """An anonymous client that does not follow redirects automatically."""
    with TestClient(app, follow_redirects=False) as c:
        yield c


@pytest.fixture
def logged_in_client(client):
    """A client holding a valid session for the first demo user."""
    response = client.post(
        "/login", data={"username": DEMO_USERNAME, "password": DEMO_PASSWORD}
    )
    assert response.status_code == 302
    return client


# ---------------------------------------------------------------------------
# Mock request / response helpers
# ---------------------------------------------------------------------------


def make_request(cookies: dict | None = None, path: str = "/") -> MagicMock:
    """Create a mock FastAPI Request with optional cookies and URL path."""
    request = MagicMock()
    request.cookies = cookies or {}
    url_mock = MagicMock()
    url_mock.path = path
    request.url = url_mock
    return request


def make_response() -> MagicMock:
    """Create a mock FastAPI Response with set_cookie and delete_cookie tracking."""
    response = MagicMock()
    response.set_cookie = MagicMock()
    response.delete_cookie = MagicMock()
    return response
