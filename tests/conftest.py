"""
Shared fixtures: a Flask app wired to an in-memory mongomock database.

Run with: pytest -v
"""

import mongomock
import pytest

from api import create_app


@pytest.fixture
def app():
    """Fresh app and empty database for every test."""
    app = create_app("testing", mongo_client=mongomock.MongoClient())
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user and return the response JSON."""

    def _register(username="testuser", email="test@example.com", password="password123", **extra):
        res = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password, **extra},
        )
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    return _register


@pytest.fixture
def auth_header():
    def _auth_header(tokens):
        return {"Authorization": f"Bearer {tokens['accessToken']}"}

    return _auth_header
