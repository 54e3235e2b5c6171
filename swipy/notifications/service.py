from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..auth.users import USERS, get_user
from ..errors import NotFoundError, ValidationError
from ..storage.base import DESCENDING, Document, DocumentStore
from .models import NotificationType
from .push import ExpoPushClient, is_expo_push_token

logger = logging.getLogger(__name__)

NOTIFICATIONS = "notifications"
LIST_LIMIT = 50
PREVIEW_LENGTH = 100


def send_notification(
    store: DocumentStore,
    push_client: ExpoPushClient,
    recipient_id: str,
    title: str,
    body: str,
    notification_type: NotificationType,
    data: dict[str, Any] | None = None,
) -> Document:
    """
    Persist a notification for ``recipient_id`` and push it to their device.

    The notification is stored even when the user has no valid push token.
    Push delivery failures are logged, never raised.
    """
    recipient = get_user(store, recipient_id)
    data = data or {}

    notification = store.insert_one(NOTIFICATIONS, {
        "recipientId": recipient_id,
        "title": title,
        "body": body,
        "type": notification_type.value,
        "data": data,
        "read": False,
        "createdAt": datetime.now(timezone.utc),
    })

    token = recipient.get("pushToken")
    if not is_expo_push_token(token):
        logger.info("User %s has no valid Expo push token, notification stored only", recipient_id)
        return notification

    tickets = push_client.send([{
        "to": token,
        "sound": "default",
        "title": title,
        "body": body,
        "data": {**data, "notificationId": notification["_id"], "type": notification_type.value},
    }])
    if tickets and not all(t.ok for t in tickets):
        logger.warning("Push for notification %s was not accepted", notification["_id"])
    return notification


def list_notifications(store: DocumentStore, user_id: str) -> list[Document]:
    return store.find(
        NOTIFICATIONS,
        {"recipientId": user_id},
        sort=[("createdAt", DESCENDING), ("_id", DESCENDING)],
        limit=LIST_LIMIT,
    )


def get_notification(store: DocumentStore, notification_id: str) -> Document:
    notification = store.find_one(NOTIFICATIONS, {"_id": notification_id})
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def mark_as_read(store: DocumentStore, notification_id: str) -> Document:
    notification = store.update_one(NOTIFICATIONS, {"_id": notification_id}, {"read": True})
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def mark_all_as_read(store: DocumentStore, user_id: str) -> int:
    return store.update_many(NOTIFICATIONS, {"recipientId": user_id, "read": False}, {"read": True})


def delete_notification(store: DocumentStore, notification_id: str) -> None:
    if store.delete_one(NOTIFICATIONS, {"_id": notification_id}) is None:
        raise NotFoundError("Notification not found")


def clear_notifications(store: DocumentStore, user_id: str) -> int:
    return store.delete_many(NOTIFICATIONS, {"recipientId": user_id})


# ── Notification builders ────────────────────────────────────────────────


def _display_name(user: Document) -> str:
    return user.get("name") or user.get("username", "")


def _friend(store: DocumentStore, friend_id: str) -> Document:
    friend = store.find_one(USERS, {"_id": friend_id})
    if friend is None:
        raise NotFoundError("Friend not found")
    return friend


def preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH - 3] + "..."
    return text


def notify_match(
    store: DocumentStore,
    push_client: ExpoPushClient,
    user_id: str | None,
    friend_id: str | None,
    restaurant_id: str | None = None,
    restaurant_name: str | None = None,
) -> Document:
    if not user_id or not friend_id:
        raise ValidationError("Missing required parameters: userId and friendId")
    friend = _friend(store, friend_id)
    name = _display_name(friend)
    body = (
        f"You and {name} both picked {restaurant_name}!"
        if restaurant_name
        else f"You have a new match with {name}"
    )
    return send_notification(
        store,
        push_client,
        user_id,
        "New match!",
        body,
        NotificationType.match,
        {
            "friendId": friend_id,
            "restaurantId": restaurant_id,
            "screen": "Matches",
            "params": {"initialFriendId": friend_id},
        },
    )


def notify_message(
    store: DocumentStore,
    push_client: ExpoPushClient,
    user_id: str | None,
    friend_id: str | None,
    message: str | None,
) -> Document:
    if not user_id or not friend_id or not message:
        raise ValidationError("Missing required parameters: userId, friendId, and message")
    friend = _friend(store, friend_id)
    return send_notification(
        store,
        push_client,
        user_id,
        f"New message from {_display_name(friend)}",
        preview(message),
        NotificationType.message,
        {"friendId": friend_id, "message": message, "screen": "Chat", "params": {"friendId": friend_id}},
    )


def notify_invitation(
    store: DocumentStore,
    push_client: ExpoPushClient,
    user_id: str | None,
    friend_id: str | None,
    restaurant_id: str | None,
) -> Document:
    if not user_id or not friend_id or not restaurant_id:
        raise ValidationError("Missing required parameters: userId, friendId, and restaurantId")
    friend = _friend(store, friend_id)
    return send_notification(
        store,
        push_client,
        user_id,
        "Restaurant invitation",
        f"{_display_name(friend)} invites you to a restaurant",
        NotificationType.invitation,
        {"friendId": friend_id, "restaurantId": restaurant_id},
    )
