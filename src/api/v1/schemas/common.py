"""Schemas shared by the group and message routes."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request.

    ``error_code`` is one of the ``ErrorCode`` values; ``details`` carries
    machine-readable context such as ``retry_after_seconds``.
    """

    error_code: str
    message: str
    details: Any | None = None


class MembershipChangeResponse(BaseModel):
    """Acknowledgement of a leave, banish or approve call."""

    group_id: UUID
    user_id: str
    message: str
