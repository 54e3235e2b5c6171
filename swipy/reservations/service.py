from __future__ import annotations

from datetime import datetime, timezone

from ..auth.users import get_user
from ..storage.base import DESCENDING, Document, DocumentStore
from .models import ReservationCreate

RESERVATIONS = "reservations"


def create_reservation(store: DocumentStore, payload: ReservationCreate) -> Document:
    """Store a reservation for an existing user; unknown users raise NotFoundError."""
    get_user(store, payload.user)
    document = payload.model_dump(by_alias=True)
    document["createdAt"] = datetime.now(timezone.utc)
    return store.insert_one(RESERVATIONS, document)


def list_reservations(store: DocumentStore, user_id: str) -> list[Document]:
    """Reservations of a user, newest date first."""
    return store.find(RESERVATIONS, {"user": user_id}, sort=[("date", DESCENDING)])
