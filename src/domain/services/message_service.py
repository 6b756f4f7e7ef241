"""Message service layer: encrypted, group-scoped message ledger."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import GroupNotFoundError, NotAGroupMemberError
from domain.entities.group import Group
from domain.entities.message import DecryptedMessage, Message
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.crypto.codec import IMessageCodec

logger = structlog.get_logger()


class MessageService:
    """Service layer for sending and reading group messages.

    Message bodies are encrypted before they reach the store and decrypted on
    every read; plaintext is never cached.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        codec: IMessageCodec,
    ) -> None:
        self._uow_factory = uow_factory
        self._codec = codec

    async def send(self, group_id: UUID, sender_id: str, text: str) -> Message:
        """Encrypt and store a message. Requires group membership."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            self._require_member(group, sender_id)

            message = Message(
                group_id=group_id,
                sender_id=sender_id,
                encrypted_text=self._codec.encrypt(text),
            )
            created = await uow.messages.create(message)
            await uow.commit()

        logger.info(
            "message_sent",
            group_id=str(group_id),
            message_id=str(created.id),
            sender_id=sender_id,
        )
        return created

    async def get_for_group(
        self, group_id: UUID, user_id: str
    ) -> list[DecryptedMessage]:
        """Get all messages of a group, oldest first. Requires group membership."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            self._require_member(group, user_id)
            messages = await uow.messages.get_for_group(group_id)

        return [
            DecryptedMessage(
                id=m.id,
                sender_id=m.sender_id,
                text=self._codec.decrypt(m.encrypted_text),
                timestamp=m.timestamp,
            )
            for m in messages
        ]

    async def _get_group(self, uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group

    def _require_member(self, group: Group, user_id: str) -> None:
        if not group.is_member(user_id):
            raise NotAGroupMemberError(str(group.id))
