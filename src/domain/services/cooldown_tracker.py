"""Per-group, per-user cooldown after leaving a group."""

import threading
from datetime import datetime, timedelta
from uuid import UUID

JOIN_COOLDOWN = timedelta(hours=48)


class CooldownTracker:
    """In-process map of (group_id, user_id) -> last leave time.

    State is lost on restart and is not shared between processes. All access
    goes through a single mutex so concurrent requests cannot lose updates.
    """

    def __init__(self, cooldown: timedelta = JOIN_COOLDOWN) -> None:
        self._cooldown = cooldown
        self._last_leave: dict[tuple[UUID, str], datetime] = {}
        self._lock = threading.Lock()

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    def record_leave(self, group_id: UUID, user_id: str, now: datetime) -> None:
        """Record (or overwrite) the user's last leave time."""
        with self._lock:
            self._last_leave[(group_id, user_id)] = now

    def remaining(self, group_id: UUID, user_id: str, now: datetime) -> timedelta:
        """Time left before the user may request again (zero if none)."""
        with self._lock:
            last_leave = self._last_leave.get((group_id, user_id))
        if last_leave is None:
            return timedelta(0)
        return max(self._cooldown - (now - last_leave), timedelta(0))

    def is_on_cooldown(self, group_id: UUID, user_id: str, now: datetime) -> bool:
        """True while ``now - last_leave < cooldown``."""
        return self.remaining(group_id, user_id, now) > timedelta(0)
