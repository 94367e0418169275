# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets the environment before any backend module is imported (config.env
# reads it at import time) and swaps MongoDB for mongomock-motor.
# =============================================================================

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/rentals_test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from database import get_db


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    return AsyncMongoMockClient()["rentals_test"]


@pytest.fixture
def app(db):
    from main import app as fastapi_app

    fastapi_app.dependency_overrides[get_db] = lambda: db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # not used as a context manager: startup hooks (indexes, worker) stay off
    return TestClient(app)


@pytest.fixture
def signup(client):
    """Create an account over HTTP and return (token, user)."""

    def _signup(email="a@x.com", password="secret1", name="Alice", phone="+15551234567"):
        res = client.post("/api/auth/signup", json={
            "name": name,
            "email": email,
            "password": password,
            "phone": phone,
        })
        assert res.status_code == 201, res.text
        body = res.json()
        return body["token"], body["user"]

    return _signup


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class ReviewInsertDown:
    """Wraps a test database so inserts into `reviews` fail like an unreachable server."""

    class _Reviews:
        def __init__(self, real):
            self._real = real

        async def insert_one(self, *args, **kwargs):
            raise ServerSelectionTimeoutError("mongo down")

        def __getattr__(self, name):
            return getattr(self._real, name)

    def __init__(self, db):
        self._db = db
        self.reviews = self._Reviews(db.reviews)

    def __getattr__(self, name):
        return getattr(self._db, name)
