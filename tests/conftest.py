"""
Test configuration and fixtures for the Lab Portal API.

DATABASE_URL is pointed at a throwaway SQLite file before the application is
imported, so the engine in app.platform.db.session never touches a real
database.
"""

import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from typing import Generator

test_db_url = os.getenv("TEST_DATABASE_URL")
if test_db_url:
    os.environ["DATABASE_URL"] = test_db_url
else:
    test_db_path = os.path.join(tempfile.mkdtemp(), "lab_portal_test.db")
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"

import pytest
from fastapi.testclient import TestClient

from app.features.auth.services.verification_codes import VerificationCodeStore


class FakeClock:
    """Manually advanced UTC clock for code expiry tests."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> VerificationCodeStore:
    """A fresh store per test, driven by the fake clock."""
    return VerificationCodeStore(clock=clock)


@pytest.fixture(scope="session")
def test_app():
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Each TestClient context runs the lifespan, so every test gets its own
    code store and sweeper.
    """
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def user_payload() -> dict:
    suffix = uuid.uuid4().hex[:8]
    return {
        "username": f"user_{suffix}",
        "name": "Test User",
        "student_id": f"S{suffix}",
        "class_name": "CS-1",
        "grade": "2024",
        "email": f"User.{suffix}@Example.com",
        "phone": "13800000000",
        "password": "secret123",
    }


@pytest.fixture
def registered_user(client, user_payload) -> dict:
    response = client.post("/api/v1/auth/register", json=user_payload)
    assert response.status_code == 201
    return user_payload
