from __future__ import annotations

import threading

import pytest

from swipy.subscriptions import SUBSCRIBERS, subscribe


def test_subscribe(client, store):
    resp = client.post("/api/subscribe", json={"email": "  Ana@Example.com "})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Thanks for subscribing! We'll be in touch soon."
    assert store.find_one(SUBSCRIBERS, {"email": "ana@example.com"}) is not None


def test_subscribe_twice_keeps_one_entry(client, store):
    client.post("/api/subscribe", json={"email": "ana@example.com"})
    resp = client.post("/api/subscribe", json={"email": "ANA@example.com"})
    assert resp.status_code == 200
    assert store.count(SUBSCRIBERS) == 1


@pytest.mark.parametrize("payload", [{}, {"email": ""}, {"email": "not-an-email"}])
def test_subscribe_rejects_invalid_email(client, payload):
    resp = client.post("/api/subscribe", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Please enter a valid email address"}


def test_concurrent_subscriptions_store_one_entry(store):
    barrier = threading.Barrier(4)

    def worker():
        barrier.wait()
        subscribe(store, "ana@example.com")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.count(SUBSCRIBERS) == 1
