from __future__ import annotations

from datetime import datetime, timezone

from ..auth.users import get_user
from ..notifications.push import ExpoPushClient
from ..notifications.service import notify_message
from ..storage.base import ASCENDING, DESCENDING, Document, DocumentStore
from .models import ChatMessageCreate

CHAT_MESSAGES = "chat_messages"
RECENT_LIMIT = 50


def recent_messages(store: DocumentStore, limit: int = RECENT_LIMIT) -> list[Document]:
    """The ``limit`` most recent messages, oldest first."""
    newest = store.find(CHAT_MESSAGES, sort=[("timestamp", DESCENDING), ("_id", DESCENDING)], limit=limit)
    return list(reversed(newest))


def conversation(store: DocumentStore, user_id: str, other_id: str) -> list[Document]:
    """Messages exchanged between two users in either direction, oldest first."""
    return store.find(
        CHAT_MESSAGES,
        {"$or": [
            {"sender": user_id, "recipient": other_id},
            {"sender": other_id, "recipient": user_id},
        ]},
        sort=[("timestamp", ASCENDING), ("_id", ASCENDING)],
    )


def post_message(store: DocumentStore, push_client: ExpoPushClient, payload: ChatMessageCreate) -> Document:
    """Store a chat message and notify the recipient, if any."""
    get_user(store, payload.sender)
    if payload.recipient:
        get_user(store, payload.recipient)

    message = store.insert_one(CHAT_MESSAGES, {
        "sender": payload.sender,
        "recipient": payload.recipient,
        "message": payload.message,
        "timestamp": datetime.now(timezone.utc),
    })

    if payload.recipient:
        notify_message(store, push_client, payload.recipient, payload.sender, payload.message)
    return message
