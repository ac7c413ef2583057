"""State machine that reconstructs the attendance session from time entries."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime

from workday_tracker.domain.entries import (
    EntryKind,
    PauseCategory,
    TimeEntry,
    normalize_timestamp,
    parse_entry,
)
from workday_tracker.domain.errors import InvalidEventError
from workday_tracker.domain.sessions import Session, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class WorkdayState:
    """Mutable fold state: Idle -> Working -> Paused(category) -> Working -> Idle."""

    status: SessionStatus = SessionStatus.IDLE
    pause_category: PauseCategory | None = None
    status_since: datetime | None = None
    latest_entry: TimeEntry | None = None
    has_checked_in: bool = False
    has_checked_out: bool = False

    def to_session(self, skipped_count: int = 0) -> Session:
        """Freeze the current state into a Session."""
        open_pauses = (
            frozenset({self.pause_category})
            if self.status is SessionStatus.PAUSED and self.pause_category
            else frozenset()
        )
        return Session(
            status=self.status,
            pause_category=self.pause_category,
            latest_entry=self.latest_entry,
            status_since=self.status_since,
            has_checked_in=self.has_checked_in,
            has_checked_out=self.has_checked_out,
            skipped_count=skipped_count,
            open_pauses=open_pauses,
        )


def apply_entry(state: WorkdayState, entry: TimeEntry) -> bool:
    """Apply one entry to the state and return True if the status changed.

    Transitions that do not fit the current status are ignored, but the entry
    still becomes the latest entry.
    """
    state.latest_entry = entry
    kind = entry.kind

    if kind is EntryKind.CHECK_IN:
        state.has_checked_in = True
        state.has_checked_out = False
        if state.status is SessionStatus.IDLE:
            _transition(state, SessionStatus.WORKING, None, entry.timestamp)
            return True
        return False

    if kind is EntryKind.CHECK_OUT:
        if state.has_checked_in:
            state.has_checked_out = True
        if state.status is SessionStatus.WORKING:
            _transition(state, SessionStatus.IDLE, None, entry.timestamp)
            return True
        return False

    category = kind.category
    if kind.is_pause_start:
        if state.status is SessionStatus.WORKING:
            _transition(state, SessionStatus.PAUSED, category, entry.timestamp)
            return True
        return False

    if kind.is_pause_end:
        # a pause can only be closed by the end of its own category
        if state.status is SessionStatus.PAUSED and state.pause_category is category:
            _transition(state, SessionStatus.WORKING, None, entry.timestamp)
            return True
        return False

    return False


def order_entries(
    entries: Iterable[TimeEntry | Mapping[str, object]],
) -> tuple[list[TimeEntry], int]:
    """Validate entries and sort them by timestamp.

    Returns the valid entries in ascending order (stable for equal timestamps)
    and the number of records that were dropped.
    """
    valid: list[TimeEntry] = []
    skipped = 0
    for item in entries:
        try:
            valid.append(_coerce_entry(item))
        except InvalidEventError as exc:
            skipped += 1
            logger.warning("Skipping malformed time entry: %s", exc)
    valid.sort(key=lambda entry: entry.timestamp)
    return valid, skipped


def reconstruct_session(
    entries: Iterable[TimeEntry | Mapping[str, object]],
) -> Session:
    """Fold time entries into the current attendance session."""
    ordered, skipped = order_entries(entries)
    state = WorkdayState()
    for entry in ordered:
        apply_entry(state, entry)
    if skipped:
        logger.warning(
            "Reconstructed session with skipped entries",
            extra={"skipped_count": skipped},
        )
    return state.to_session(skipped_count=skipped)


def _transition(
    state: WorkdayState,
    status: SessionStatus,
    category: PauseCategory | None,
    at: datetime,
) -> None:
    state.status = status
    state.pause_category = category
    state.status_since = at


def _coerce_entry(item: object) -> TimeEntry:
    if isinstance(item, TimeEntry):
        timestamp = normalize_timestamp(item.timestamp)
        if timestamp is item.timestamp:
            return item
        return replace(item, timestamp=timestamp)
    if isinstance(item, Mapping):
        return parse_entry(item)
    raise InvalidEventError(f"Unsupported entry type: {type(item).__name__}")
