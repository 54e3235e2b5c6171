from __future__ import annotations

import threading

import pytest
from fastapi.testclient import TestClient

from swipy.auth.users import USERS, authenticate, register_user
from swipy.errors import ValidationError
from swipy.storage.memory import MemoryStore


# ── Register / Login / Logout ────────────────────────────────────────────


def test_register_returns_public_user(client, store):
    resp = client.post("/api/users/register", json={"name": "Ana", "username": "ana", "password": "pw"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "ana"
    assert body["name"] == "Ana"
    assert body["isOnline"] is False
    assert "passwordHash" not in body
    assert "pushToken" not in body

    stored = store.find_one(USERS, {"_id": body["_id"]})
    assert stored["passwordHash"] != "pw"


def test_register_missing_fields(client):
    resp = client.post("/api/users/register", json={"username": "ana"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name, username, and password are required"}


def test_register_duplicate_username(client, make_user):
    make_user("ana")
    resp = client.post("/api/users/register", json={"name": "Other", "username": "ana", "password": "x"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "User already exists"}


def test_login_success(client, make_user):
    user = make_user("ana")
    resp = client.post("/api/users/login", json={"username": "ana", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.json()["_id"] == user["_id"]


def test_login_wrong_password(client, make_user):
    make_user("ana")
    resp = client.post("/api/users/login", json={"username": "ana", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_register_password_too_long(client, store):
    resp = client.post("/api/users/register", json={"name": "Ana", "username": "ana", "password": "p" * 80})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Password must be at most 72 bytes"}
    assert store.count(USERS) == 0


def test_password_limit_counts_bytes(client):
    # 37 two-byte characters
    resp = client.post("/api/users/register", json={"name": "Ana", "username": "ana", "password": "é" * 37})
    assert resp.status_code == 400


def test_register_password_at_limit(client, login):
    resp = client.post("/api/users/register", json={"name": "Ana", "username": "ana", "password": "p" * 72})
    assert resp.status_code == 201
    login("ana", password="p" * 72)


def test_login_password_too_long(client, make_user):
    make_user("ana")
    resp = client.post("/api/users/login", json={"username": "ana", "password": "p" * 80})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_authenticate_rejects_long_password():
    store = MemoryStore()
    register_user(store, "Ana", "ana", "secret123")
    assert authenticate(store, "ana", "x" * 100) is None
    assert authenticate(store, "ana", "secret123")["username"] == "ana"


def test_concurrent_registrations_keep_username_unique():
    store = MemoryStore()
    barrier = threading.Barrier(4)
    created, rejected = [], []

    def worker():
        barrier.wait()
        try:
            created.append(register_user(store, "N", "dup", "secret123"))
        except ValidationError as exc:
            rejected.append(exc.message)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(created) == 1
    assert rejected == ["User already exists"] * 3
    assert store.count(USERS, {"username": "dup"}) == 1


def test_register_rejects_when_insert_loses_race():
    store = MemoryStore()
    register_user(store, "Ana", "ana", "secret123")
    # Lookup misses, but the atomic insert still sees the existing username.
    store.find_one = lambda collection, query: None
    with pytest.raises(ValidationError, match="User already exists"):
        register_user(store, "Other", "ana", "secret123")
    assert store.count(USERS, {"username": "ana"}) == 1


def test_login_unknown_user(client):
    resp = client.post("/api/users/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_me_when_logged_in(client, make_user, login):
    user = make_user("ana")
    login("ana")
    resp = client.get("/api/users/me")
    assert resp.status_code == 200
    assert resp.json() == {"id": user["_id"], "username": "ana", "name": "Ana"}


def test_me_not_logged_in(client):
    resp = client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated"}


def test_logout_clears_session(client, make_user, login):
    make_user("ana")
    login("ana")
    resp = client.post("/api/users/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    assert client.get("/api/users/me").status_code == 401


# ── Presence ─────────────────────────────────────────────────────────────


def test_update_status(client, make_user):
    user = make_user("ana")
    resp = client.put(f"/api/users/{user['_id']}/status", json={"isOnline": True})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    statuses = client.post("/api/users/status", json={"userIds": [user["_id"]]}).json()
    assert statuses[0]["userId"] == user["_id"]
    assert statuses[0]["isOnline"] is True
    assert statuses[0]["lastSeen"] is not None


def test_update_status_unknown_user(client):
    resp = client.put("/api/users/000000000000000000000000/status", json={"isOnline": True})
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_update_status_requires_flag(client, make_user):
    user = make_user("ana")
    resp = client.put(f"/api/users/{user['_id']}/status", json={})
    assert resp.status_code == 400
    assert "isOnline" in resp.json()["error"]


def test_statuses_skip_unknown_ids(client, make_user):
    ana = make_user("ana")
    ben = make_user("ben")
    resp = client.post("/api/users/status", json={"userIds": [ana["_id"], "missing", ben["_id"]]})
    assert resp.status_code == 200
    assert {s["userId"] for s in resp.json()} == {ana["_id"], ben["_id"]}


# ── Push tokens ──────────────────────────────────────────────────────────


def test_register_push_token(client, store, make_user, login):
    user = make_user("ana")
    login("ana")
    resp = client.put(f"/api/users/{user['_id']}/push-token", json={"pushToken": "ExponentPushToken[abc]"})
    assert resp.status_code == 200
    assert store.find_one(USERS, {"_id": user["_id"]})["pushToken"] == "ExponentPushToken[abc]"


def test_push_token_requires_login(client, make_user):
    user = make_user("ana")
    resp = client.put(f"/api/users/{user['_id']}/push-token", json={"pushToken": "ExponentPushToken[abc]"})
    assert resp.status_code == 401


def test_push_token_for_other_user_forbidden(client, make_user, login):
    make_user("ana")
    ben = make_user("ben")
    login("ana")
    resp = client.put(f"/api/users/{ben['_id']}/push-token", json={"pushToken": "ExponentPushToken[abc]"})
    assert resp.status_code == 403


def test_push_token_cannot_be_empty(client, make_user, login):
    user = make_user("ana")
    login("ana")
    resp = client.put(f"/api/users/{user['_id']}/push-token", json={"pushToken": ""})
    assert resp.status_code == 400


def test_sessions_are_per_client(client, make_user, login):
    make_user("ana")
    login("ana")
    other = TestClient(client.app)
    assert other.get("/api/users/me").status_code == 401
