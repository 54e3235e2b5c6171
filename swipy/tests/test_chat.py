from __future__ import annotations

from datetime import datetime, timedelta, timezone

from swipy.chat.service import CHAT_MESSAGES, RECENT_LIMIT
from swipy.notifications.service import NOTIFICATIONS


def _send(client, sender: str, message: str, recipient: str | None = None):
    payload = {"sender": sender, "message": message}
    if recipient:
        payload["recipient"] = recipient
    return client.post("/api/chat", json=payload)


def test_post_message(client, make_user):
    ana = make_user("ana")
    resp = _send(client, ana["_id"], "Anyone up for ramen?")
    assert resp.status_code == 200
    body = resp.json()
    assert body["sender"] == ana["_id"]
    assert body["recipient"] is None
    assert body["message"] == "Anyone up for ramen?"
    assert body["timestamp"]


def test_post_message_unknown_sender(client):
    resp = _send(client, "000000000000000000000000", "hello")
    assert resp.status_code == 404


def test_post_message_unknown_recipient(client, make_user, store):
    ana = make_user("ana")
    resp = _send(client, ana["_id"], "hello", recipient="000000000000000000000000")
    assert resp.status_code == 404
    assert store.count(CHAT_MESSAGES) == 0


def test_empty_message_rejected(client, make_user):
    ana = make_user("ana")
    resp = _send(client, ana["_id"], "")
    assert resp.status_code == 400


def test_direct_message_notifies_recipient(client, make_user, store):
    ana = make_user("ana")
    ben = make_user("ben")
    _send(client, ana["_id"], "See you at 8", recipient=ben["_id"])

    notifications = store.find(NOTIFICATIONS, {"recipientId": ben["_id"]})
    assert len(notifications) == 1
    assert notifications[0]["title"] == "New message from Ana"
    assert notifications[0]["body"] == "See you at 8"
    assert notifications[0]["type"] == "message"


def test_direct_message_pushes_to_device(client, make_user, login, push_requests):
    ana = make_user("ana")
    ben = make_user("ben")
    login("ben")
    client.put(f"/api/users/{ben['_id']}/push-token", json={"pushToken": "ExponentPushToken[ben]"})

    _send(client, ana["_id"], "See you at 8", recipient=ben["_id"])

    assert len(push_requests) == 1
    [push] = push_requests[0]
    assert push["to"] == "ExponentPushToken[ben]"
    assert push["title"] == "New message from Ana"
    assert push["data"]["type"] == "message"


def test_conversation_both_directions(client, make_user):
    ana = make_user("ana")
    ben = make_user("ben")
    cleo = make_user("cleo")
    _send(client, ana["_id"], "hi ben", recipient=ben["_id"])
    _send(client, ben["_id"], "hi ana", recipient=ana["_id"])
    _send(client, ana["_id"], "hi cleo", recipient=cleo["_id"])
    _send(client, ana["_id"], "hi all")

    resp = client.get(f"/api/chat/{ben['_id']}/{ana['_id']}")
    assert resp.status_code == 200
    assert [m["message"] for m in resp.json()] == ["hi ben", "hi ana"]


def test_recent_messages_are_latest_in_chronological_order(client, store):
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i in range(RECENT_LIMIT + 5):
        store.insert_one(CHAT_MESSAGES, {
            "sender": "u1",
            "recipient": None,
            "message": f"m{i}",
            "timestamp": start + timedelta(minutes=i),
        })

    resp = client.get("/api/chat")
    assert resp.status_code == 200
    messages = [m["message"] for m in resp.json()]
    assert len(messages) == RECENT_LIMIT
    assert messages[0] == "m5"
    assert messages[-1] == f"m{RECENT_LIMIT + 4}"
