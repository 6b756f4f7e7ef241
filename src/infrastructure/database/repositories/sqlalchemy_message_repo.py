"""SQLAlchemy implementation of Message repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.message import Message
from infrastructure.database.models import MessageModel


class SQLAlchemyMessageRepository:
    """SQLAlchemy implementation of IMessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        """Append a new message.

        The timestamp is raised to the group's latest one if the clock went
        backwards, so timestamps never decrease in insertion order.
        """
        latest = await self._latest_timestamp(message.group_id)
        if latest is not None and message.timestamp < latest:
            message.timestamp = latest
        model = self._to_model(message)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_for_group(self, group_id: UUID) -> list[Message]:
        """Get all messages of a group, oldest first."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.group_id == group_id)
            .order_by(MessageModel.timestamp, MessageModel.seq)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def _latest_timestamp(self, group_id: UUID) -> datetime | None:
        stmt = select(func.max(MessageModel.timestamp)).where(
            MessageModel.group_id == group_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: MessageModel) -> Message:
        """Convert ORM model to domain entity."""
        return Message(
            id=model.id,
            group_id=model.group_id,
            sender_id=model.sender_id,
            encrypted_text=model.encrypted_text,
            timestamp=model.timestamp,
        )

    def _to_model(self, entity: Message) -> MessageModel:
        """Convert domain entity to ORM model."""
        return MessageModel(
            id=entity.id,
            group_id=entity.group_id,
            sender_id=entity.sender_id,
            encrypted_text=entity.encrypted_text,
            timestamp=entity.timestamp,
        )
