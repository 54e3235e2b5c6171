from __future__ import annotations

import logging

from .restaurants.discovery import RESTAURANTS
from .restaurants.models import RestaurantCreate
from .storage.base import DocumentStore
from .storage.config import DEFAULT_STORE_CONFIG, StoreConfig
from .storage.factory import build_store

logger = logging.getLogger(__name__)

DEMO_RESTAURANTS: list[dict] = [
    {
        "name": "Sakura Garden",
        "cuisine": "Japanese",
        "priceRange": "$$$",
        "rating": 4.8,
        "location": "Downtown Manhattan",
        "image": "https://images.unsplash.com/photo-1579871494447-9811cf80d66c",
        "vegetarian": True,
        "vegan": False,
        "glutenFree": True,
        "openNow": True,
        "coordinates": {"latitude": 40.7128, "longitude": -74.0060},
    },
    {
        "name": "Trattoria Nonna",
        "cuisine": "Italian",
        "priceRange": "$$",
        "rating": 4.6,
        "location": "Little Italy",
        "image": "https://images.unsplash.com/photo-1555396273-367ea4eb4db5",
        "vegetarian": True,
        "vegan": False,
        "glutenFree": False,
        "openNow": True,
        "coordinates": {"latitude": 40.7191, "longitude": -73.9973},
    },
    {
        "name": "Green Bowl",
        "cuisine": "Healthy",
        "priceRange": "$",
        "rating": 4.4,
        "location": "Brooklyn Heights",
        "image": "https://images.unsplash.com/photo-1512621776951-a57141f2eefd",
        "vegetarian": True,
        "vegan": True,
        "glutenFree": True,
        "openNow": False,
        "coordinates": {"latitude": 40.6959, "longitude": -73.9956},
    },
    {
        "name": "Taqueria Sol",
        "cuisine": "Mexican",
        "priceRange": "$",
        "rating": 4.2,
        "location": "East Village",
        "image": "https://images.unsplash.com/photo-1565299585323-38d6b0865b47",
        "vegetarian": True,
        "vegan": True,
        "glutenFree": False,
        "openNow": True,
        "coordinates": {"latitude": 40.7265, "longitude": -73.9815},
    },
    {
        "name": "Le Petit Bistro",
        "cuisine": "French",
        "priceRange": "$$$$",
        "rating": 4.7,
        "location": "Upper East Side",
        "image": "https://images.unsplash.com/photo-1414235077428-338989a2e8c0",
        "vegetarian": False,
        "vegan": False,
        "glutenFree": False,
        "openNow": False,
        "coordinates": {"latitude": 40.7736, "longitude": -73.9566},
    },
    {
        "name": "Curry House",
        "cuisine": "Indian",
        "priceRange": "$$",
        "rating": 4.3,
        "location": "Jackson Heights",
        "image": "https://images.unsplash.com/photo-1585937421612-70a008356fbe",
        "vegetarian": True,
        "vegan": True,
        "glutenFree": True,
        "openNow": True,
        "coordinates": None,
    },
]


def seed_restaurants(store: DocumentStore) -> int:
    """Insert the demo restaurants into an empty collection. Returns the number inserted."""
    if store.count(RESTAURANTS) > 0:
        logger.info("Restaurants already seeded, skipping")
        return 0

    for raw in DEMO_RESTAURANTS:
        store.insert_one(RESTAURANTS, RestaurantCreate.model_validate(raw).to_document())
    logger.info("Seeded %d demo restaurants", len(DEMO_RESTAURANTS))
    return len(DEMO_RESTAURANTS)


def run_seed(config: StoreConfig = DEFAULT_STORE_CONFIG) -> int:
    store = build_store(config)
    try:
        return seed_restaurants(store)
    finally:
        store.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    inserted = run_seed()
    print(f"Seeding complete. Inserted {inserted} restaurants.")
