from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


class RestaurantCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    cuisine: str = ""
    price_range: str = Field(default="", alias="priceRange")
    rating: float | None = None
    location: str = ""
    image: str = ""
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = Field(default=False, alias="glutenFree")
    open_now: bool = Field(default=False, alias="openNow")
    coordinates: Coordinates | None = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Restaurant(RestaurantCreate):
    id: str = Field(..., alias="_id")


class DiscoveryCriteria(BaseModel):
    """Parsed restaurant search criteria. ``None`` means "no constraint"."""

    location: str | None = None
    cuisine: str | None = None
    price_range: str | None = None
    min_rating: float | None = None
    vegetarian: bool | None = None
    vegan: bool | None = None
    gluten_free: bool | None = None
    open_now: bool | None = None
    radius: float | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_center(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def uses_radius(self) -> bool:
        return self.radius is not None and self.has_center
