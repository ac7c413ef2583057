"""Domain models for the derived attendance session."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from workday_tracker.domain.entries import PauseCategory, TimeEntry


class SessionStatus(str, Enum):
    """What the user is doing at a given instant."""

    IDLE = "idle"
    WORKING = "working"
    PAUSED = "paused"


@dataclass(frozen=True)
class Session:
    """Attendance state reconstructed from a user's time entries."""

    status: SessionStatus = SessionStatus.IDLE
    pause_category: PauseCategory | None = None
    latest_entry: TimeEntry | None = None
    status_since: datetime | None = None
    has_checked_in: bool = False
    has_checked_out: bool = False
    skipped_count: int = 0
    open_pauses: frozenset[PauseCategory] = field(default_factory=frozenset)

    @property
    def is_active(self) -> bool:
        """Return True while the workday is running (working or paused)."""
        return self.status is not SessionStatus.IDLE

    def is_pause_open(self, category: PauseCategory) -> bool:
        """Return True when a pause of this category is currently open."""
        return category in self.open_pauses
