"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.cooldown_tracker import CooldownTracker
from domain.services.group_locks import GroupLockRegistry
from domain.services.group_service import GroupService
from domain.services.message_service import MessageService
from infrastructure.crypto.aes_codec import AESMessageCodec
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_message_codec() -> AESMessageCodec:
    """Get the process-wide message codec.

    Raises CipherConfigurationError if AES_KEY or AES_IV is not 16 bytes.
    """
    return AESMessageCodec.from_settings(settings)


@lru_cache
def get_cooldown_tracker() -> CooldownTracker:
    """Get the process-wide cooldown tracker."""
    return CooldownTracker()


@lru_cache
def get_group_locks() -> GroupLockRegistry:
    """Get the process-wide group lock registry."""
    return GroupLockRegistry()


@lru_cache
def get_group_service() -> GroupService:
    """Get Group service instance."""
    return GroupService(
        get_uow_factory(),
        cooldowns=get_cooldown_tracker(),
        locks=get_group_locks(),
    )


@lru_cache
def get_message_service() -> MessageService:
    """Get Message service instance."""
    return MessageService(get_uow_factory(), codec=get_message_codec())
