"""Group domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

DEFAULT_MAX_MEMBERS = 100
MIN_MAX_MEMBERS = 2


class GroupType(str, Enum):
    """How new members get in."""

    OPEN = "open"
    PRIVATE = "private"


class MembershipStatus(str, Enum):
    """Status of a user within a group.

    A user holds at most one status per group, so the member, pending and
    banished sets are always disjoint.
    """

    MEMBER = "member"
    PENDING = "pending"
    BANISHED = "banished"


@dataclass
class Group:
    """Domain entity for a messaging group.

    Membership is kept as a single ``user_id -> status`` mapping; the
    ``members``, ``join_requests`` and ``banished_users`` views are derived
    from it.
    """

    name: str
    type: GroupType
    owner_id: str
    id: UUID = field(default_factory=uuid4)
    max_members: int = DEFAULT_MAX_MEMBERS
    memberships: dict[str, MembershipStatus] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
    version: int = 0

    @property
    def members(self) -> frozenset[str]:
        return self._with_status(MembershipStatus.MEMBER)

    @property
    def join_requests(self) -> frozenset[str]:
        return self._with_status(MembershipStatus.PENDING)

    @property
    def banished_users(self) -> frozenset[str]:
        return self._with_status(MembershipStatus.BANISHED)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members

    def status_of(self, user_id: str) -> MembershipStatus | None:
        """Return the user's status, or None for a non-member."""
        return self.memberships.get(user_id)

    def is_member(self, user_id: str) -> bool:
        return self.memberships.get(user_id) == MembershipStatus.MEMBER

    def is_owner(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def set_status(self, user_id: str, status: MembershipStatus) -> None:
        self.memberships[user_id] = status

    def clear_status(self, user_id: str) -> None:
        self.memberships.pop(user_id, None)

    def _with_status(self, status: MembershipStatus) -> frozenset[str]:
        return frozenset(u for u, s in self.memberships.items() if s == status)
