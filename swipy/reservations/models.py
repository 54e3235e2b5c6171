from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReservationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., min_length=1)
    restaurant: str | None = None
    restaurant_name: str | None = Field(default=None, alias="restaurantName")
    date: datetime
    party_size: int | None = Field(default=None, ge=1, alias="partySize")
    special_requests: str | None = Field(default=None, alias="specialRequests")
    status: str = "pending"

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Reservation(ReservationCreate):
    id: str = Field(..., alias="_id")
    created_at: datetime | None = Field(default=None, alias="createdAt")
