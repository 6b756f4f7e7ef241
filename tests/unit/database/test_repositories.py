"""Tests for the SQLAlchemy repositories and unit of work (SQLite in memory)."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from core.exceptions import ConcurrentModificationError, GroupNotFoundError, StoreUnavailableError
from domain.entities.group import Group, GroupType, MembershipStatus
from domain.entities.message import Message
from infrastructure.database.models import GroupMembershipModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


async def _create_group(uow_factory: UowFactory, **overrides) -> Group:
    fields = {
        "name": "Chat",
        "type": GroupType.PRIVATE,
        "owner_id": "owner-1",
        "memberships": {"owner-1": MembershipStatus.MEMBER},
    }
    fields.update(overrides)
    async with uow_factory() as uow:
        created = await uow.groups.create(Group(**fields))
        await uow.commit()
    return created


class TestGroupRepository:
    async def test_create_and_get(self, uow_factory: UowFactory):
        created = await _create_group(uow_factory, max_members=5)

        async with uow_factory() as uow:
            loaded = await uow.groups.get(created.id)

        assert loaded is not None
        assert loaded.name == "Chat"
        assert loaded.type == GroupType.PRIVATE
        assert loaded.max_members == 5
        assert loaded.members == {"owner-1"}
        assert loaded.version == 1

    async def test_get_missing_returns_none(self, uow_factory: UowFactory):
        async with uow_factory() as uow:
            assert await uow.groups.get(uuid4()) is None

    async def test_update_syncs_membership_rows(
        self, uow_factory: UowFactory, session_factory
    ):
        created = await _create_group(
            uow_factory,
            memberships={
                "owner-1": MembershipStatus.MEMBER,
                "u-pending": MembershipStatus.PENDING,
                "u-member": MembershipStatus.MEMBER,
            },
        )

        async with uow_factory() as uow:
            group = await uow.groups.get(created.id)
            group.set_status("u-pending", MembershipStatus.MEMBER)
            group.clear_status("u-member")
            group.set_status("u-new", MembershipStatus.BANISHED)
            saved = await uow.groups.update(group)
            await uow.commit()

        assert saved.version == 2

        async with uow_factory() as uow:
            loaded = await uow.groups.get(created.id)

        assert loaded.members == {"owner-1", "u-pending"}
        assert loaded.join_requests == frozenset()
        assert loaded.banished_users == {"u-new"}
        assert loaded.version == 2

        async with session_factory() as session:
            rows = (
                await session.execute(
                    select(GroupMembershipModel).where(
                        GroupMembershipModel.group_id == created.id
                    )
                )
            ).scalars().all()
        assert sorted(r.user_id for r in rows) == ["owner-1", "u-new", "u-pending"]

    async def test_stale_version_rejected(self, uow_factory: UowFactory):
        created = await _create_group(uow_factory)

        async with uow_factory() as uow:
            stale = await uow.groups.get(created.id)

        async with uow_factory() as uow:
            fresh = await uow.groups.get(created.id)
            fresh.set_status("u-1", MembershipStatus.PENDING)
            await uow.groups.update(fresh)
            await uow.commit()

        stale.set_status("u-2", MembershipStatus.PENDING)
        with pytest.raises(ConcurrentModificationError):
            async with uow_factory() as uow:
                await uow.groups.update(stale)
                await uow.commit()

        async with uow_factory() as uow:
            loaded = await uow.groups.get(created.id)
        assert loaded.join_requests == {"u-1"}

    async def test_update_missing_group(self, uow_factory: UowFactory):
        with pytest.raises(GroupNotFoundError):
            async with uow_factory() as uow:
                await uow.groups.update(Group(name="x", type=GroupType.OPEN, owner_id="o"))


class TestMessageRepository:
    async def test_clock_stepping_back_keeps_send_order(self, uow_factory: UowFactory):
        group = await _create_group(uow_factory)
        t0 = datetime(2026, 3, 1, 12, 0, 0)
        late = t0 + timedelta(seconds=5)

        async with uow_factory() as uow:
            await uow.messages.create(Message(group.id, "a", "first", timestamp=late))
            second = await uow.messages.create(
                Message(group.id, "b", "second", timestamp=t0)
            )
            await uow.commit()

        assert second.timestamp == late

        async with uow_factory() as uow:
            messages = await uow.messages.get_for_group(group.id)

        assert [m.encrypted_text for m in messages] == ["first", "second"]
        assert messages[0].timestamp <= messages[1].timestamp

    async def test_clamping_is_per_group(self, uow_factory: UowFactory):
        first = await _create_group(uow_factory)
        second = await _create_group(uow_factory, name="Other")
        t0 = datetime(2026, 3, 1, 12, 0, 0)

        async with uow_factory() as uow:
            await uow.messages.create(
                Message(first.id, "a", "x", timestamp=t0 + timedelta(hours=1))
            )
            created = await uow.messages.create(Message(second.id, "a", "y", timestamp=t0))
            await uow.commit()

        assert created.timestamp == t0

    async def test_equal_timestamps_keep_insertion_order(self, uow_factory: UowFactory):
        group = await _create_group(uow_factory)
        t0 = datetime(2026, 3, 1, 12, 0, 0)

        async with uow_factory() as uow:
            for text in ["one", "two", "three"]:
                await uow.messages.create(Message(group.id, "a", text, timestamp=t0))
            await uow.commit()

        async with uow_factory() as uow:
            messages = await uow.messages.get_for_group(group.id)

        assert [m.encrypted_text for m in messages] == ["one", "two", "three"]

    async def test_scoped_to_group(self, uow_factory: UowFactory):
        first = await _create_group(uow_factory)
        second = await _create_group(uow_factory, name="Other")

        async with uow_factory() as uow:
            await uow.messages.create(Message(first.id, "a", "for-first"))
            await uow.messages.create(Message(second.id, "a", "for-second"))
            await uow.commit()

        async with uow_factory() as uow:
            messages = await uow.messages.get_for_group(second.id)

        assert [m.encrypted_text for m in messages] == ["for-second"]


class TestUnitOfWork:
    async def test_rolls_back_on_error(self, uow_factory: UowFactory):
        group = Group(name="Chat", type=GroupType.OPEN, owner_id="owner-1")

        with pytest.raises(ValueError):
            async with uow_factory() as uow:
                await uow.groups.create(group)
                raise ValueError("abort")

        async with uow_factory() as uow:
            assert await uow.groups.get(group.id) is None

    async def test_translates_driver_failure(self, uow_factory: UowFactory):
        with pytest.raises(StoreUnavailableError) as exc_info:
            async with uow_factory():
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        assert exc_info.value.status_code == 503

    async def test_repositories_require_context(self, uow_factory: UowFactory):
        with pytest.raises(RuntimeError):
            uow_factory().groups
