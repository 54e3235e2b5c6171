from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import bcrypt

from ..errors import NotFoundError, ValidationError
from ..storage.base import Document, DocumentStore

logger = logging.getLogger(__name__)

USERS = "users"

# bcrypt only reads the first 72 bytes; 5.x rejects longer input.
MAX_PASSWORD_BYTES = 72


def _too_long(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def session_identity(user: Document) -> dict[str, Any]:
    """The subset of a user document kept in the session cookie."""
    return {"id": user["_id"], "username": user["username"], "name": user.get("name", "")}


def register_user(store: DocumentStore, name: str | None, username: str | None, password: str | None) -> Document:
    """Create a user with a bcrypt password hash. Returns the stored document."""
    if not name or not username or not password:
        raise ValidationError("Name, username, and password are required")
    if _too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    if store.find_one(USERS, {"username": username}) is not None:
        raise ValidationError("User already exists")

    now = _now()
    user = store.insert_unique(USERS, {
        "name": name,
        "username": username,
        "passwordHash": _hash_password(password),
        "pushToken": None,
        "isOnline": False,
        "lastSeen": now,
        "lastSwipedAt": None,
        "createdAt": now,
    }, fields=["username"])
    if user is None:
        raise ValidationError("User already exists")
    logger.info("Registered user %s", username)
    return user


def authenticate(store: DocumentStore, username: str, password: str) -> Document | None:
    """Verify credentials. Returns the user document or ``None``."""
    if _too_long(password):
        return None
    user = store.find_one(USERS, {"username": username})
    if user and _verify_password(password, user.get("passwordHash", "")):
        return user
    return None


def get_user(store: DocumentStore, user_id: str) -> Document:
    user = store.find_one(USERS, {"_id": user_id})
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_status(store: DocumentStore, user_id: str, is_online: bool) -> Document:
    user = store.update_one(USERS, {"_id": user_id}, {"isOnline": is_online, "lastSeen": _now()})
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_statuses(store: DocumentStore, user_ids: list[str]) -> list[Document]:
    return store.find(USERS, {"_id": {"$in": user_ids}})


def set_push_token(store: DocumentStore, user_id: str, push_token: str) -> Document:
    user = store.update_one(USERS, {"_id": user_id}, {"pushToken": push_token})
    if user is None:
        raise NotFoundError("User not found")
    return user
