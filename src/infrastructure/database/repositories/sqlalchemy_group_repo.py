"""SQLAlchemy implementation of Group repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import ConcurrentModificationError, GroupNotFoundError
from domain.entities.group import Group, GroupType, MembershipStatus
from infrastructure.database.models import GroupMembershipModel, GroupModel


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID, memberships included."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, group: Group) -> Group:
        """Create a new group."""
        model = self._to_model(group)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, group: Group) -> Group:
        """Save membership changes, bumping the version counter."""
        model = await self._get_model(group.id)
        if not model:
            raise GroupNotFoundError(str(group.id))
        if model.version != group.version:
            raise ConcurrentModificationError(str(group.id))

        existing = {m.user_id: m for m in model.memberships}
        for user_id, status in group.memberships.items():
            row = existing.pop(user_id, None)
            if row is None:
                model.memberships.append(
                    GroupMembershipModel(user_id=user_id, status=status.value)
                )
            elif row.status != status.value:
                row.status = status.value
        for row in existing.values():
            model.memberships.remove(row)

        model.version = group.version + 1

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise ConcurrentModificationError(str(group.id)) from e

        return self._to_entity(model)

    async def _get_model(self, id: UUID) -> GroupModel | None:
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            type=GroupType(model.type),
            owner_id=model.owner_id,
            max_members=model.max_members,
            memberships={
                m.user_id: MembershipStatus(m.status) for m in model.memberships
            },
            created_at=model.created_at,
            version=model.version,
        )

    def _to_model(self, entity: Group) -> GroupModel:
        """Convert domain entity to ORM model."""
        return GroupModel(
            id=entity.id,
            name=entity.name,
            type=entity.type.value,
            owner_id=entity.owner_id,
            max_members=entity.max_members,
            created_at=entity.created_at,
            version=1,
            memberships=[
                GroupMembershipModel(user_id=user_id, status=status.value)
                for user_id, status in entity.memberships.items()
            ],
        )
