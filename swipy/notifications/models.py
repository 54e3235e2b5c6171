from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationType(str, Enum):
    match = "match"
    message = "message"
    invitation = "invitation"
    system = "system"


class Notification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    recipient_id: str = Field(..., alias="recipientId")
    title: str
    body: str
    type: NotificationType
    data: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = Field(default=None, alias="createdAt")


class MatchTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    friend_id: str | None = Field(default=None, alias="friendId")
    restaurant_id: str | None = Field(default=None, alias="restaurantId")
    restaurant_name: str | None = Field(default=None, alias="restaurantName")


class MessageTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    friend_id: str | None = Field(default=None, alias="friendId")
    message: str | None = None


class InvitationTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    friend_id: str | None = Field(default=None, alias="friendId")
    restaurant_id: str | None = Field(default=None, alias="restaurantId")


class SentNotificationResponse(BaseModel):
    message: str
    notification: Notification
