from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    name: str | None = None
    username: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    username: str
    is_online: bool = Field(default=False, alias="isOnline")
    last_seen: datetime | None = Field(default=None, alias="lastSeen")
    last_swiped_at: datetime | None = Field(default=None, alias="lastSwipedAt")


class StatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_online: bool = Field(..., alias="isOnline")


class StatusQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_ids: list[str] = Field(..., alias="userIds")


class UserStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    is_online: bool = Field(default=False, alias="isOnline")
    last_seen: datetime | None = Field(default=None, alias="lastSeen")
    last_swiped_at: datetime | None = Field(default=None, alias="lastSwipedAt")


class PushTokenUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    push_token: str = Field(..., min_length=1, alias="pushToken")
