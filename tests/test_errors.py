import asyncio
import time

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import JSONResponse

from conftest import auth_headers, register
from fintrack.accounts.expenses.service import expense_repository
from fintrack.config import settings
from fintrack.core.middleware import enforce_deadline
from fintrack.core.validation import first_error_message
from fintrack.database import get_db
from fintrack.main import app


@pytest.fixture
def lenient_client(session_factory):
    """Client that returns 500 responses instead of re-raising."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_malformed_json_is_bad_request(client):
    token, _ = register(client)
    response = client.post(
        "/api/expenses",
        content=b"{not json",
        headers={**auth_headers(token), "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unexpected_error_does_not_leak_detail(lenient_client, monkeypatch):
    token, _ = register(lenient_client)

    def explode(*args, **kwargs):
        raise RuntimeError("connection string with password=hunter2")

    monkeypatch.setattr(expense_repository, "list", explode)

    response = lenient_client.get("/api/expenses", headers=auth_headers(token))

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Server Error"}
    assert "hunter2" not in response.text


def test_first_error_message_formats_field_and_message():
    errors = [{"loc": ("body", "amount"), "msg": "Value error, must be positive"}]
    assert first_error_message(errors) == "amount: must be positive"
    assert first_error_message([]) == "Invalid input"
    assert first_error_message([{"loc": (), "msg": "broken"}]) == "broken"


def _request(method="GET", path="/api/expenses"):
    return Request({"type": "http", "method": method, "path": path, "headers": [], "query_string": b""})


def test_deadline_answers_504_when_exceeded(monkeypatch):
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 0.01)

    async def slow(request):
        await asyncio.sleep(1)
        return JSONResponse({"late": True})

    response = asyncio.run(enforce_deadline(_request(), slow))

    assert response.status_code == 504
    assert response.body == b'{"success":false,"error":"Request timed out"}'


def test_deadline_passes_fast_responses_through(monkeypatch):
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 5)

    async def fast(request):
        return JSONResponse({"ok": True})

    response = asyncio.run(enforce_deadline(_request(), fast))
    assert response.status_code == 200


def test_deadline_disabled_when_zero(monkeypatch):
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 0)

    async def fast(request):
        return JSONResponse({"ok": True})

    response = asyncio.run(enforce_deadline(_request(), fast))
    assert response.status_code == 200


def test_deadline_leaves_writes_to_finish(monkeypatch):
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 0.01)

    async def slow_write(request):
        await asyncio.sleep(0.05)
        return JSONResponse({"saved": True}, status_code=201)

    response = asyncio.run(enforce_deadline(_request("POST"), slow_write))
    assert response.status_code == 201


def test_slow_write_through_the_app_commits_and_reports_success(client, monkeypatch):
    token, _ = register(client)
    headers = auth_headers(token)
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 0.1)
    original_create = expense_repository.create

    def slow_create(*args, **kwargs):
        time.sleep(0.3)
        return original_create(*args, **kwargs)

    monkeypatch.setattr(expense_repository, "create", slow_create)

    response = client.post(
        "/api/expenses",
        json={"amount": 5, "description": "Coffee", "category": "Food"},
        headers=headers,
    )

    assert response.status_code == 201
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 30)
    assert client.get("/api/expenses", headers=headers).json()["count"] == 1


def test_slow_read_through_the_app_times_out(client, monkeypatch):
    token, _ = register(client)
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 0.1)

    def slow_list(*args, **kwargs):
        time.sleep(0.5)
        return []

    monkeypatch.setattr(expense_repository, "list", slow_list)

    response = client.get("/api/expenses", headers=auth_headers(token))

    assert response.status_code == 504
    assert response.json() == {"success": False, "error": "Request timed out"}
