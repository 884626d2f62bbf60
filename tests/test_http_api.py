from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from adapters.http_api import create_app
from adapters.sqlite_storage import SQLiteHistoryStore
from core.config import HistoryConfig, NotificationConfig
from core.errors import PersistenceError
from core.lexicon import build_lexicon
from core.models import ClassificationRecord, NotificationDecision
from core.processor import SpamCheckProcessor


class FakeNotifier:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.sent: list[tuple[NotificationDecision, ClassificationRecord]] = []
        self._error = error

    async def notify(self, decision: NotificationDecision, record: ClassificationRecord) -> bool:
        self.sent.append((decision, record))
        if self._error is not None:
            raise self._error
        return True


class UnreachableStorage:
    def append(self, record):
        raise PersistenceError("connection refused")

    def recent(self, limit):
        raise PersistenceError("connection refused")


def _build(storage, notifier: FakeNotifier) -> TestClient:
    processor = SpamCheckProcessor(
        lexicon=build_lexicon(),
        store=storage,
        notifier=notifier,
        notification_config=NotificationConfig(threshold_percent=40, default_recipient=None),
        history_config=HistoryConfig(limit=10),
        background_notifications=False,
    )
    return TestClient(create_app(processor), raise_server_exceptions=False)


@pytest.fixture
def storage(tmp_path) -> SQLiteHistoryStore:
    store = SQLiteHistoryStore(str(tmp_path / "api.db"))
    store.init_db()
    return store


def test_root_reports_running(storage) -> None:
    client = _build(storage, FakeNotifier())
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.text


def test_check_returns_classification(storage) -> None:
    notifier = FakeNotifier()
    client = _build(storage, notifier)

    response = client.post(
        "/api/spam/check",
        json={
            "text": "Congratulations! You are a WINNER of a FREE prize. Click here now!",
            "notifyEmail": "user@example.com",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"id", "result", "spamProbability", "matchedKeywords", "createdAt"}
    assert body["result"] == "spam"
    assert body["spamProbability"] == 1.0
    assert "click here" in body["matchedKeywords"]
    assert notifier.sent[0][0].recipient == "user@example.com"
    assert storage.count() == 1


def test_check_without_recipient_is_not_alerted(storage) -> None:
    notifier = FakeNotifier()
    client = _build(storage, notifier)

    response = client.post("/api/spam/check", json={"text": "free cash offer"})

    assert response.status_code == 200
    assert response.json()["result"] == "spam"
    assert notifier.sent == []


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
def test_blank_text_is_bad_request(storage, payload) -> None:
    notifier = FakeNotifier()
    client = _build(storage, notifier)

    response = client.post("/api/spam/check", json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": "Text is required"}
    assert storage.count() == 0
    assert notifier.sent == []


def test_malformed_body_is_bad_request(storage) -> None:
    client = _build(storage, FakeNotifier())

    response = client.post(
        "/api/spam/check",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "message" in response.json()


def test_notification_failure_does_not_change_response(storage) -> None:
    client = _build(storage, FakeNotifier(error=RuntimeError("smtp down")))

    response = client.post(
        "/api/spam/check",
        json={"text": "URGENT: free cash prize", "notifyEmail": "user@example.com"},
    )

    assert response.status_code == 200
    assert response.json()["result"] == "spam"
    assert storage.count() == 1


def test_persistence_failure_is_server_error() -> None:
    notifier = FakeNotifier()
    client = _build(UnreachableStorage(), notifier)

    response = client.post("/api/spam/check", json={"text": "free cash", "notifyEmail": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}
    assert notifier.sent == []


def test_history_is_newest_first_and_truncated(storage) -> None:
    client = _build(storage, FakeNotifier())
    long_text = "a" * 100
    for i in range(11):
        client.post("/api/spam/check", json={"text": f"message {i}"})
    client.post("/api/spam/check", json={"text": long_text})

    response = client.get("/api/spam/history")

    assert response.status_code == 200
    items = response.json()
    assert len(items) == 10
    assert set(items[0]) == {"id", "result", "spamProbability", "matchedKeywords", "text", "createdAt"}
    assert items[0]["text"] == "a" * 77 + "..."
    assert items[1]["text"] == "message 10"


def test_history_limit_query_is_capped(storage) -> None:
    client = _build(storage, FakeNotifier())
    for i in range(12):
        client.post("/api/spam/check", json={"text": f"note {i}"})

    assert len(client.get("/api/spam/history", params={"limit": 3}).json()) == 3
    assert len(client.get("/api/spam/history", params={"limit": 50}).json()) == 10


def test_history_store_failure_is_server_error() -> None:
    client = _build(UnreachableStorage(), FakeNotifier())

    response = client.get("/api/spam/history")

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}


def test_background_alert_finishes_before_shutdown(storage) -> None:
    notifier = FakeNotifier()
    processor = SpamCheckProcessor(
        lexicon=build_lexicon(),
        store=storage,
        notifier=notifier,
        notification_config=NotificationConfig(threshold_percent=40, default_recipient=None),
    )

    with TestClient(create_app(processor)) as client:
        response = client.post(
            "/api/spam/check",
            json={"text": "URGENT: free cash prize", "notifyEmail": "user@example.com"},
        )
        assert response.status_code == 200

    assert len(notifier.sent) == 1
    assert notifier.sent[0][0].recipient == "user@example.com"
    assert notifier.sent[0][1].id == response.json()["id"]


def test_bad_recipient_type_is_not_reported_as_missing_text(storage) -> None:
    notifier = FakeNotifier()
    client = _build(storage, notifier)

    response = client.post("/api/spam/check", json={"text": "free cash", "notifyEmail": 123})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request"}
    assert storage.count() == 0
    assert notifier.sent == []


def test_non_string_text_is_reported_as_missing_text(storage) -> None:
    client = _build(storage, FakeNotifier())

    response = client.post("/api/spam/check", json={"text": 123})

    assert response.status_code == 400
    assert response.json() == {"message": "Text is required"}


def test_bad_history_limit_is_invalid_request(storage) -> None:
    client = _build(storage, FakeNotifier())

    response = client.get("/api/spam/history", params={"limit": "abc"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request"}
