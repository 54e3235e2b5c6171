from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageCreate(BaseModel):
    sender: str = Field(..., min_length=1)
    recipient: str | None = None
    message: str = Field(..., min_length=1, max_length=2000)


class ChatMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    sender: str
    recipient: str | None = None
    message: str
    timestamp: datetime
