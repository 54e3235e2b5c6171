from __future__ import annotations

import logging
import math
import re
import time
from numbers import Number
from typing import Any, Mapping

from ..errors import ValidationError
from ..storage.base import Document, DocumentStore, Query
from .geo import haversine_distance
from .models import DiscoveryCriteria

logger = logging.getLogger(__name__)

RESTAURANTS = "restaurants"
ANY_VALUE = "all"


def _text(params: Mapping[str, Any], name: str) -> str | None:
    raw = params.get(name)
    if raw is None or raw == "":
        return None
    return str(raw)


def _number(
    params: Mapping[str, Any],
    name: str,
    low: float | None = None,
    high: float | None = None,
) -> float | None:
    raw = _text(params, name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got {raw!r}")
    if low is not None and value < low:
        raise ValidationError(f"{name} must be at least {low}, got {raw!r}")
    if high is not None and value > high:
        raise ValidationError(f"{name} must be at most {high}, got {raw!r}")
    return value


def _flag(params: Mapping[str, Any], name: str) -> bool | None:
    raw = _text(params, name)
    if raw is None:
        return None
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValidationError(f"{name} must be 'true' or 'false', got {raw!r}")


def _choice(params: Mapping[str, Any], name: str) -> str | None:
    value = _text(params, name)
    if value is None or value == ANY_VALUE:
        return None
    return value


def parse_criteria(params: Mapping[str, Any]) -> DiscoveryCriteria:
    """Parse raw query-string values into criteria, rejecting malformed numbers."""
    return DiscoveryCriteria(
        location=_text(params, "location"),
        cuisine=_choice(params, "cuisine"),
        price_range=_choice(params, "priceRange"),
        min_rating=_number(params, "minRating"),
        vegetarian=_flag(params, "vegetarian"),
        vegan=_flag(params, "vegan"),
        gluten_free=_flag(params, "glutenFree"),
        open_now=_flag(params, "openNow"),
        radius=_number(params, "radius", low=0),
        latitude=_number(params, "latitude", low=-90, high=90),
        longitude=_number(params, "longitude", low=-180, high=180),
    )


def build_query(criteria: DiscoveryCriteria) -> Query:
    """Translate the non-geographic criteria into a store filter."""
    query: Query = {}

    if criteria.location:
        query["location"] = {"$regex": re.escape(criteria.location), "$options": "i"}
    if criteria.cuisine:
        query["cuisine"] = criteria.cuisine
    if criteria.price_range:
        query["priceRange"] = criteria.price_range
    if criteria.min_rating is not None:
        query["rating"] = {"$gte": criteria.min_rating}

    # Only an explicit "true" constrains; "false" means "don't care".
    flags = {
        "vegetarian": criteria.vegetarian,
        "vegan": criteria.vegan,
        "glutenFree": criteria.gluten_free,
        "openNow": criteria.open_now,
    }
    for field, value in flags.items():
        if value is True:
            query[field] = True

    return query


def _coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, Number):
        return None
    return float(value)


def within_radius(restaurant: Document, latitude: float, longitude: float, radius: float) -> bool:
    """True when the restaurant has both coordinates and lies within ``radius`` meters."""
    coordinates = restaurant.get("coordinates")
    if not isinstance(coordinates, dict):
        return False
    lat = _coordinate(coordinates.get("latitude"))
    lng = _coordinate(coordinates.get("longitude"))
    if lat is None or lng is None:
        return False
    return haversine_distance(latitude, longitude, lat, lng) <= radius


def discover_restaurants(store: DocumentStore, criteria: DiscoveryCriteria) -> list[Document]:
    """Return restaurants matching ``criteria`` in storage order."""
    start_time = time.time()

    candidates = store.find(RESTAURANTS, build_query(criteria))

    if criteria.uses_radius:
        results = [
            r for r in candidates
            if within_radius(r, criteria.latitude, criteria.longitude, criteria.radius)
        ]
    else:
        if criteria.radius is not None:
            logger.debug("radius given without latitude/longitude, skipping distance filter")
        results = candidates

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "restaurant search: %d candidates, %d results in %.1f ms",
        len(candidates),
        len(results),
        elapsed_ms,
    )
    return results
