"""Message repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.message import Message


class IMessageRepository(Protocol):
    """Repository interface for Message entities."""

    async def create(self, message: Message) -> Message:
        """Append a new message."""
        ...

    async def get_for_group(self, group_id: UUID) -> list[Message]:
        """Get all messages of a group, oldest first.

        Ties on timestamp are broken by insertion order.
        """
        ...
