"""Pydantic schemas for Message API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    text: str = Field(..., min_length=1, max_length=4000)


class MessageSentResponse(BaseModel):
    """Schema for a stored message receipt."""

    id: UUID
    timestamp: datetime


class MessageSentDetailResponse(BaseModel):
    """Schema for single sent message response."""

    data: MessageSentResponse


class MessageResponse(BaseModel):
    """Schema for a decrypted message."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: str
    text: str
    timestamp: datetime


class MessageListResponse(BaseModel):
    """Schema for list of Messages response."""

    data: list[MessageResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
