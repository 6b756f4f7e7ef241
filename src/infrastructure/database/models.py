"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class GroupModel(Base):
    """Group model.

    ``version`` is the optimistic-concurrency counter; the repository bumps it
    on every save and SQLAlchemy rejects the UPDATE if the stored value moved.
    """

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint("type IN ('open', 'private')", name="ck_groups_type"),
        CheckConstraint("max_members >= 2", name="ck_groups_max_members"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    # Relationships
    memberships: Mapped[list["GroupMembershipModel"]] = relationship(
        "GroupMembershipModel",
        back_populates="group",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupMembershipModel(Base):
    """Membership status of a user in a group (composite PK on group_id + user_id)."""

    __tablename__ = "group_memberships"

    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)
    status: Mapped[str] = mapped_column(
        String(10),
        CheckConstraint("status IN ('member', 'pending', 'banished')"),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    group: Mapped["GroupModel"] = relationship(
        "GroupModel",
        back_populates="memberships",
    )


class MessageModel(Base):
    """Encrypted group message.

    ``seq`` is an autoincrementing key that records insertion order and breaks
    ties between equal timestamps.
    """

    __tablename__ = "messages"

    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        unique=True,
        nullable=False,
        default=uuid4,
    )
    group_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id: Mapped[str] = mapped_column(String(255), nullable=False)
    encrypted_text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )
