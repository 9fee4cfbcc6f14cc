"""Smoke tests for API routes."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from exam_pilot.api.routes import register_error_handlers, router
from exam_pilot.errors import ServiceUnavailableError
from exam_pilot.storage.kv import KeyValueStore
from exam_pilot.tutor.client import TutorClient
from exam_pilot.tutor.explainer import Explainer


@pytest.fixture
def explainer():
    explainer = MagicMock(spec=Explainer)
    explainer.explain = AsyncMock(return_value="STEP 1: Add\nFINAL ANSWER: 2")
    explainer.close = AsyncMock()
    return explainer


@pytest.fixture
def client(tmp_path, explainer):
    app = FastAPI()
    app.state.tutor = TutorClient(KeyValueStore(tmp_path), explainer)
    register_error_handlers(app)
    app.include_router(router)
    with TestClient(app) as c:
        yield c


def _signup(client, email="ada@example.com") -> dict:
    response = client.post(
        "/api/signup", json={"email": email, "password": "secret1", "name": "Ada"}
    )
    assert response.status_code == 200
    return response.json()


def _headers(payload: dict) -> dict:
    return {"X-Session-Token": payload["token"]}


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuth:
    def test_signup(self, client):
        payload = _signup(client)
        assert payload["profile"]["level"] == 1
        assert payload["profile"]["xp"] == 0
        assert payload["remaining_questions"] == 5
        assert "password" not in payload["profile"]

    def test_duplicate_signup(self, client):
        _signup(client)
        response = client.post(
            "/api/signup", json={"email": "ada@example.com", "password": "secret1", "name": "X"}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateAccountError"

    def test_short_password(self, client):
        response = client.post(
            "/api/signup", json={"email": "a@example.com", "password": "123", "name": "A"}
        )
        assert response.status_code == 400

    def test_login_errors(self, client):
        response = client.post(
            "/api/login", json={"email": "nobody@example.com", "password": "secret1"}
        )
        assert response.status_code == 404
        _signup(client)
        response = client.post(
            "/api/login", json={"email": "ada@example.com", "password": "wrong-pass"}
        )
        assert response.status_code == 401

    def test_session_requires_token(self, client):
        payload = _signup(client)
        assert client.get("/api/session").status_code == 401
        assert client.get("/api/session", headers={"X-Session-Token": "bad"}).status_code == 401
        response = client.get("/api/session", headers=_headers(payload))
        assert response.status_code == 200
        assert response.json()["profile"]["email"] == "ada@example.com"

    def test_logout(self, client):
        payload = _signup(client)
        assert client.post("/api/logout").status_code == 200
        assert client.get("/api/session", headers=_headers(payload)).status_code == 401


    def test_corrupt_accounts_is_a_handled_error(self, client, tmp_path):
        (tmp_path / "accounts.json").write_text("{broken")
        response = client.post(
            "/api/login", json={"email": "ada@example.com", "password": "secret1"}
        )
        assert response.status_code == 503
        assert response.json()["error"] == "StorageError"


class TestQuestions:
    def test_ask_and_history(self, client):
        headers = _headers(_signup(client))
        response = client.post(
            "/api/questions", json={"question": "1+1", "subject": "math"}, headers=headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["record"]["steps"] == ["Add"]
        assert data["record"]["final_answer"] == "2"
        assert data["profile"]["xp"] == 10
        assert data["new_badges"] == ["first_question"]
        assert data["badge_messages"] == ["New badge: First Steps!"]
        assert data["remaining_questions"] == 4

        history = client.get("/api/questions", headers=headers).json()
        assert [item["question"] for item in history] == ["1+1"]

    def test_invalid_subject(self, client):
        headers = _headers(_signup(client))
        response = client.post(
            "/api/questions", json={"question": "q", "subject": "history"}, headers=headers
        )
        assert response.status_code == 422

    def test_empty_question(self, client):
        headers = _headers(_signup(client))
        response = client.post("/api/questions", json={"question": ""}, headers=headers)
        assert response.status_code == 400

    def test_quota_returns_upgrade_prompt(self, client):
        headers = _headers(_signup(client))
        for i in range(5):
            client.post("/api/questions", json={"question": f"q{i}"}, headers=headers)
        response = client.post("/api/questions", json={"question": "q5"}, headers=headers)
        assert response.status_code == 402
        assert "Upgrade to Premium" in response.json()["detail"]

    def test_upgrade_lifts_quota(self, client):
        headers = _headers(_signup(client))
        for i in range(5):
            client.post("/api/questions", json={"question": f"q{i}"}, headers=headers)
        upgraded = client.post("/api/upgrade", headers=headers).json()
        assert upgraded["profile"]["tier"] == "premium"
        response = client.post("/api/questions", json={"question": "q5"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["remaining_questions"] is None

    def test_fallback_when_service_down(self, client, explainer):
        explainer.explain.side_effect = ServiceUnavailableError("down")
        headers = _headers(_signup(client))
        response = client.post("/api/questions", json={"question": "q"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["used_fallback"] is True
        assert len(response.json()["record"]["steps"]) == 4


class TestLanguageAndBadges:
    def test_toggle_and_set(self, client):
        assert client.post("/api/language", json={}).json() == {"language": "ar"}
        assert client.post("/api/language", json={"language": "en"}).json() == {
            "language": "en"
        }

    def test_badges(self, client):
        headers = _headers(_signup(client))
        client.post("/api/questions", json={"question": "q"}, headers=headers)
        badges = client.get("/api/badges", headers=headers).json()
        earned = [b["id"] for b in badges if b["earned"]]
        assert earned == ["first_question"]

    def test_badge_messages_localized(self, client):
        headers = _headers(_signup(client))
        client.post("/api/language", json={"language": "ar"})
        data = client.post("/api/questions", json={"question": "q"}, headers=headers).json()
        assert data["badge_messages"] == ["شارة جديدة: First Steps!"]
