"""
Shared pytest fixtures for the finance tracker tests.
"""

import os
import tempfile
import uuid

# Settings are read at import time, so the test environment goes in first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ARGON2_ROUNDS"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["EXPOSE_RESET_TOKEN"] = "true"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="fintrack-uploads-")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fintrack.database import Base, build_engine, get_db  # noqa: E402
from fintrack.main import app  # noqa: E402
from fintrack.users import service  # noqa: E402


@pytest.fixture
def db_engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests hit the per-test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Register a user straight through the credential store."""

    def _make(name="Test User", email=None, password="secret1"):
        email = email or f"user_{uuid.uuid4().hex[:10]}@example.com"
        return service.register_user(db, name, email, password)

    return _make


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name="Test User", email=None, password="secret1"):
    """Register over HTTP; returns (token, user payload)."""
    email = email or f"user_{uuid.uuid4().hex[:10]}@example.com"
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return data["token"], data["user"]
