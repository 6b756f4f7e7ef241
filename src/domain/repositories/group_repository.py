"""Group repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Group


class IGroupRepository(Protocol):
    """Repository interface for Group entities.

    A Group is loaded and saved together with its membership rows.
    """

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        ...

    async def update(self, group: Group) -> Group:
        """Save a group loaded earlier in the same unit of work.

        Raises ConcurrentModificationError if the stored version moved on.
        """
        ...
