"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.group_repository import IGroupRepository
from domain.repositories.message_repository import IMessageRepository


class IUnitOfWork(Protocol):
    """One transaction over the group and message stores.

    Leaving the context without ``commit()`` discards every change made
    through ``groups`` and ``messages``.
    """

    groups: IGroupRepository
    messages: IMessageRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Roll back on error and release the connection."""
        ...
