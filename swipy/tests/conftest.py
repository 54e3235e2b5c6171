from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from swipy.app import create_app
from swipy.config import AppConfig
from swipy.notifications.config import PushConfig
from swipy.notifications.push import ExpoPushClient
from swipy.storage.memory import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def push_requests():
    """Bodies of every request the fake Expo service received."""
    return []


@pytest.fixture
def push_client(push_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        messages = json.loads(request.content)
        push_requests.append(messages)
        return httpx.Response(
            200,
            json={"data": [{"status": "ok", "id": f"ticket-{i}"} for i in range(len(messages))]},
        )

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return ExpoPushClient(PushConfig(enabled=True), http_client=http_client)


@pytest.fixture
def client(store, push_client):
    app = create_app(AppConfig(session_secret="test-secret"), store=store, push_client=push_client)
    return TestClient(app)


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its public document."""

    def _make_user(username: str, password: str = "secret123", name: str | None = None) -> dict:
        resp = client.post("/api/users/register", json={
            "name": name or username.title(),
            "username": username,
            "password": password,
        })
        assert resp.status_code == 201
        return resp.json()

    return _make_user


@pytest.fixture
def login(client):
    def _login(username: str, password: str = "secret123") -> None:
        resp = client.post("/api/users/login", json={"username": username, "password": password})
        assert resp.status_code == 200

    return _login
