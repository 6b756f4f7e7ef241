"""Pydantic schemas for Group API."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["open", "private"]
    max_members: int = Field(100, ge=2, le=10_000, alias="maxMembers")


class GroupResponse(BaseModel):
    """Schema for Group response.

    ``members`` is filled in for members and pending requesters only; pending
    requests and banished users for the owner only.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    owner_id: str
    max_members: int
    member_count: int
    members: list[str] | None = None
    join_requests: list[str] | None = None
    banished_users: list[str] | None = None
    created_at: datetime


class GroupDetailResponse(BaseModel):
    """Schema for single Group response."""

    data: GroupResponse


class JoinResponse(BaseModel):
    """Schema for the result of a join call."""

    status: Literal["joined", "requested"]
    message: str


class JoinRequestListResponse(BaseModel):
    """Schema for list of pending join requests."""

    data: list[str]
    meta: dict[str, Any] = Field(default_factory=dict)
