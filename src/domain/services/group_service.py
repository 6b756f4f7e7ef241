"""Group service layer: the membership state machine."""

import math
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from uuid import UUID

import structlog

from core.exceptions import (
    AlreadyAGroupMemberError,
    CannotBanishOwnerError,
    GroupFullError,
    GroupNotFoundError,
    GroupValidationError,
    InsufficientPermissionsError,
    JoinCooldownError,
    JoinRequestNotFoundError,
    NotInGroupError,
    OwnerCannotLeaveError,
    UserBanishedError,
)
from domain.entities.group import (
    DEFAULT_MAX_MEMBERS,
    MIN_MAX_MEMBERS,
    Group,
    GroupType,
    MembershipStatus,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cooldown_tracker import CooldownTracker
from domain.services.group_locks import GroupLockRegistry

logger = structlog.get_logger()

MAX_NAME_LENGTH = 100


class JoinResult(str, Enum):
    """Outcome of a successful join call."""

    JOINED = "joined"
    REQUESTED = "requested"


class GroupService:
    """Service layer for group creation and membership transitions.

    Every transition runs its read-modify-write under the group's lock and
    inside a single unit of work, so it either fully applies or leaves the
    store untouched.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cooldowns: CooldownTracker | None = None,
        locks: GroupLockRegistry | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._cooldowns = cooldowns or CooldownTracker()
        self._locks = locks or GroupLockRegistry()
        self._clock = clock

    async def create(
        self,
        user_id: str,
        name: str,
        group_type: GroupType | str,
        max_members: int = DEFAULT_MAX_MEMBERS,
    ) -> Group:
        """Create a group owned by the caller, who becomes its only member."""
        name = (name or "").strip()
        if not name or len(name) > MAX_NAME_LENGTH:
            raise GroupValidationError(
                f"Group name must be 1-{MAX_NAME_LENGTH} characters", field="name"
            )
        try:
            group_type = GroupType(group_type)
        except ValueError:
            raise GroupValidationError(
                "Group type must be 'open' or 'private'", field="type"
            ) from None
        if max_members < MIN_MAX_MEMBERS:
            raise GroupValidationError(
                f"maxMembers must be at least {MIN_MAX_MEMBERS}", field="maxMembers"
            )

        group = Group(
            name=name,
            type=group_type,
            owner_id=user_id,
            max_members=max_members,
            memberships={user_id: MembershipStatus.MEMBER},
        )

        async with self._uow_factory() as uow:
            created = await uow.groups.create(group)
            await uow.commit()

        logger.info(
            "group_created",
            group_id=str(created.id),
            owner_id=user_id,
            group_type=created.type.value,
        )
        return created

    async def get_by_id(self, group_id: UUID) -> Group:
        """Get a group by ID."""
        async with self._uow_factory() as uow:
            return await self._get_group(uow, group_id)

    async def get_join_requests(self, group_id: UUID, user_id: str) -> list[str]:
        """List pending join requests. Owner only."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            self._require_owner(group, user_id)
            return sorted(group.join_requests)

    async def join(self, group_id: UUID, user_id: str) -> JoinResult:
        """Join an open group, or request to join a private one.

        Requesting again while a request is pending is a no-op.
        """
        async with self._locks.hold(group_id):
            async with self._uow_factory() as uow:
                group = await self._get_group(uow, group_id)
                status = group.status_of(user_id)

                if status == MembershipStatus.MEMBER:
                    raise AlreadyAGroupMemberError(user_id)

                if group.type == GroupType.OPEN:
                    if status == MembershipStatus.BANISHED:
                        raise UserBanishedError(str(group_id))
                    self._require_capacity(group)
                    group.set_status(user_id, MembershipStatus.MEMBER)
                    await uow.groups.update(group)
                    await uow.commit()
                    logger.info("group_joined", group_id=str(group_id), user_id=user_id)
                    return JoinResult.JOINED

                if status == MembershipStatus.PENDING:
                    return JoinResult.REQUESTED

                # A banished user may re-request; only approval lets them back in
                remaining = self._cooldowns.remaining(group_id, user_id, self._clock())
                if remaining.total_seconds() > 0:
                    raise JoinCooldownError(
                        str(group_id), math.ceil(remaining.total_seconds())
                    )

                group.set_status(user_id, MembershipStatus.PENDING)
                await uow.groups.update(group)
                await uow.commit()

        logger.info("join_requested", group_id=str(group_id), user_id=user_id)
        return JoinResult.REQUESTED

    async def leave(self, group_id: UUID, user_id: str) -> None:
        """Leave a group and start the re-join cooldown."""
        async with self._locks.hold(group_id):
            async with self._uow_factory() as uow:
                group = await self._get_group(uow, group_id)

                if not group.is_member(user_id):
                    raise NotInGroupError(user_id)
                if group.is_owner(user_id):
                    raise OwnerCannotLeaveError()

                group.clear_status(user_id)
                await uow.groups.update(group)
                await uow.commit()

            self._cooldowns.record_leave(group_id, user_id, self._clock())

        logger.info("group_left", group_id=str(group_id), user_id=user_id)

    async def banish(
        self, group_id: UUID, user_id: str, target_user_id: str
    ) -> None:
        """Remove a user and block them from joining directly. Owner only."""
        async with self._locks.hold(group_id):
            async with self._uow_factory() as uow:
                group = await self._get_group(uow, group_id)
                self._require_owner(group, user_id)

                if group.is_owner(target_user_id):
                    raise CannotBanishOwnerError()
                if group.status_of(target_user_id) == MembershipStatus.BANISHED:
                    return

                group.set_status(target_user_id, MembershipStatus.BANISHED)
                await uow.groups.update(group)
                await uow.commit()

        logger.info(
            "member_banished",
            group_id=str(group_id),
            user_id=target_user_id,
            actor_id=user_id,
        )

    async def approve(
        self, group_id: UUID, user_id: str, target_user_id: str
    ) -> None:
        """Turn a pending join request into membership. Owner only."""
        async with self._locks.hold(group_id):
            async with self._uow_factory() as uow:
                group = await self._get_group(uow, group_id)
                self._require_owner(group, user_id)

                if group.status_of(target_user_id) != MembershipStatus.PENDING:
                    raise JoinRequestNotFoundError(target_user_id)
                self._require_capacity(group)

                group.set_status(target_user_id, MembershipStatus.MEMBER)
                await uow.groups.update(group)
                await uow.commit()

        logger.info(
            "join_request_approved",
            group_id=str(group_id),
            user_id=target_user_id,
            actor_id=user_id,
        )

    # --- Internal helpers ---

    async def _get_group(self, uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group

    def _require_owner(self, group: Group, user_id: str) -> None:
        if not group.is_owner(user_id):
            raise InsufficientPermissionsError("owner")

    def _require_capacity(self, group: Group) -> None:
        if group.is_full:
            raise GroupFullError(str(group.id), group.max_members)
