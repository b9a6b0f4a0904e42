"""Tests for the HTTP surface."""

import datetime as dt

import pytest
from fastapi.testclient import TestClient

from app.deps import get_chat_service
from app.errors import UpstreamCompletionError
from app.models.schemas import ExpensePayload
from conftest import ADVICE_REPLY, COFFEE_REPLY
from main import app

HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def api(make_service):
    def _api(replies=None, error=None, raise_server_exceptions=True):
        service = make_service(replies, error)
        app.dependency_overrides[get_chat_service] = lambda: service
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    yield _api
    app.dependency_overrides.clear()


def test_health(api):
    assert api().get("/health").json() == {"status": "ok"}


def test_chat_tracks_expense(api, repo):
    response = api([COFFEE_REPLY]).post(
        "/chat", json={"message": "I spent $12.50 on coffee today"}, headers=HEADERS
    )

    assert response.status_code == 200
    body = response.json()
    assert "$12.5 for food" in body["message"]
    assert body["expense"] == {
        "type": "expense",
        "amount": 12.5,
        "category": "food",
        "description": "coffee",
        "date": "2024-01-15",
    }
    assert len(repo.list_expenses("user-1")) == 1


def test_chat_plain_reply(api):
    response = api([ADVICE_REPLY]).post(
        "/chat", json={"message": "How can I save more money?"}, headers=HEADERS
    )

    assert response.json() == {"message": ADVICE_REPLY, "expense": None}


def test_missing_identity_is_401(api, repo):
    response = api([ADVICE_REPLY]).post("/chat", json={"message": "hi"})

    assert response.status_code == 401
    assert "error" in response.json()
    assert repo.list_turns("user-1") == []


def test_upstream_failure_is_500_and_writes_nothing(api, repo):
    error = UpstreamCompletionError("AI API error: 503", upstream_status=503)

    response = api(error=error).post("/chat", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {"error": "AI API error: 503"}
    assert repo.list_turns("user-1") == []


def test_blank_message_rejected(api):
    response = api().post("/chat", json={"message": "   "}, headers=HEADERS)

    assert response.status_code == 422
    assert response.json()["error"].startswith("message:")


def test_missing_message_rejected(api):
    response = api().post("/chat", json={}, headers=HEADERS)

    assert response.status_code == 422
    assert response.json() == {"error": "message: Field required"}


def test_unexpected_error_is_500_with_error_body(api, repo):
    response = api(error=RuntimeError("boom"), raise_server_exceptions=False).post(
        "/chat", json={"message": "hi"}, headers=HEADERS
    )

    assert response.status_code == 500
    assert response.json() == {"error": "boom"}
    assert repo.list_turns("user-1") == []


def test_list_messages_oldest_first(api, repo):
    repo.add_turn("user-1", "user", "first")
    repo.add_turn("user-1", "assistant", "second")
    repo.add_turn("user-2", "user", "not mine")

    response = api().get("/messages", headers=HEADERS)

    assert [m["content"] for m in response.json()] == ["first", "second"]


def test_list_expenses_with_total(api, repo):
    repo.add_expense("user-1", ExpensePayload(amount=12.5, category="food", date=dt.date(2024, 1, 15)))
    repo.add_expense("user-1", ExpensePayload(amount=7.25, category="Transport", date=dt.date(2024, 1, 16)))

    body = api().get("/expenses", headers=HEADERS).json()

    assert body["total"] == 19.75
    assert [e["category"] for e in body["expenses"]] == ["Transport", "food"]


@pytest.mark.parametrize("status", ["401", "422", "500"])
def test_error_responses_documented(status):
    responses = app.openapi()["paths"]["/chat"]["post"]["responses"]

    schema = responses[status]["content"]["application/json"]["schema"]
    assert schema["$ref"].endswith("/ErrorResponse")
