from __future__ import annotations

from ..errors import NotFoundError
from ..storage.base import Document, DocumentStore
from .discovery import RESTAURANTS
from .models import RestaurantCreate


def create_restaurant(store: DocumentStore, payload: RestaurantCreate) -> Document:
    return store.insert_one(RESTAURANTS, payload.to_document())


def get_restaurant(store: DocumentStore, restaurant_id: str) -> Document:
    restaurant = store.find_one(RESTAURANTS, {"_id": restaurant_id})
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    return restaurant
