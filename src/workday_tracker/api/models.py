"""Pydantic models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from workday_tracker.domain.entries import EntryKind, PauseCategory, TimeEntry
from workday_tracker.domain.sessions import Session, SessionStatus
from workday_tracker.domain.summaries import DailySummary, Granularity, RangeView
from workday_tracker.services.timer import ElapsedTime


class EntryCreate(BaseModel):
    """Request body for registering a time entry."""

    kind: EntryKind
    notes: str | None = None


class TimezoneUpdate(BaseModel):
    """Request body for changing the user's timezone."""

    timezone: str


class EntryOut(BaseModel):
    """Time entry payload."""

    id: UUID
    user_id: UUID
    kind: EntryKind
    timestamp: datetime
    notes: str | None = None

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            kind=entry.kind,
            timestamp=entry.timestamp,
            notes=entry.notes,
        )


class SessionOut(BaseModel):
    """Current attendance state payload."""

    status: SessionStatus
    pause_category: PauseCategory | None = None
    is_active: bool
    has_checked_in: bool
    has_checked_out: bool
    open_pauses: dict[PauseCategory, bool]
    status_since: datetime | None = None
    latest_entry: EntryOut | None = None
    skipped_count: int = 0

    @classmethod
    def from_session(cls, session: Session) -> "SessionOut":
        return cls(
            status=session.status,
            pause_category=session.pause_category,
            is_active=session.is_active,
            has_checked_in=session.has_checked_in,
            has_checked_out=session.has_checked_out,
            open_pauses={
                category: session.is_pause_open(category) for category in PauseCategory
            },
            status_since=session.status_since,
            latest_entry=(
                EntryOut.from_entry(session.latest_entry)
                if session.latest_entry
                else None
            ),
            skipped_count=session.skipped_count,
        )


class SummaryOut(BaseModel):
    """Daily summary payload."""

    id: str
    day: date
    total_worked_seconds: int
    breaks_count: int
    breaks_total_seconds: int
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_placeholder: bool = False

    @classmethod
    def from_summary(cls, summary: DailySummary) -> "SummaryOut":
        return cls(
            id=summary.id,
            day=summary.day,
            total_worked_seconds=summary.total_worked_seconds,
            breaks_count=summary.breaks_count,
            breaks_total_seconds=summary.breaks_total_seconds,
            start_time=summary.start_time,
            end_time=summary.end_time,
            is_placeholder=summary.is_placeholder,
        )


class TodayOut(BaseModel):
    """Today's session, summary and entries."""

    day: date
    session: SessionOut
    summary: SummaryOut | None = None
    entries: list[EntryOut]


class HistoryOut(BaseModel):
    """Historical range view payload."""

    view: Granularity
    start: datetime
    end: datetime
    summaries: list[SummaryOut]
    entries_by_day: dict[date, list[EntryOut]]

    @classmethod
    def from_view(cls, granularity: Granularity, view: RangeView) -> "HistoryOut":
        return cls(
            view=granularity,
            start=view.date_range.start,
            end=view.date_range.end,
            summaries=[SummaryOut.from_summary(item) for item in view.summaries],
            entries_by_day={
                day: [EntryOut.from_entry(entry) for entry in entries]
                for day, entries in view.entries_by_day().items()
            },
        )


class ElapsedOut(BaseModel):
    """Projected elapsed time payload."""

    seconds: int
    formatted: str

    @classmethod
    def from_elapsed(cls, elapsed: ElapsedTime) -> "ElapsedOut":
        return cls(seconds=elapsed.seconds, formatted=elapsed.formatted)
