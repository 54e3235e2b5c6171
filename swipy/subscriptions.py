from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from .errors import ValidationError
from .storage.base import Document, DocumentStore

logger = logging.getLogger(__name__)

SUBSCRIBERS = "subscribers"


class SubscribeRequest(BaseModel):
    email: str | None = None


def subscribe(store: DocumentStore, email: str | None) -> Document:
    """Add an e-mail address to the landing-page mailing list (idempotent)."""
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("Please enter a valid email address")

    subscriber = store.insert_unique(
        SUBSCRIBERS,
        {"email": email, "createdAt": datetime.now(timezone.utc)},
        fields=["email"],
    )
    if subscriber is None:
        return store.find_one(SUBSCRIBERS, {"email": email})

    logger.info("New subscription: %s", email)
    return subscriber
