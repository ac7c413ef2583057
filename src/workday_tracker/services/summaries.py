"""Daily summary calculation from a day's time entries."""

from collections.abc import Iterable
from datetime import date, datetime, tzinfo
from typing import Protocol
from uuid import UUID

from workday_tracker.domain.entries import EntryKind, TimeEntry
from workday_tracker.domain.sessions import SessionStatus
from workday_tracker.domain.summaries import DailySummary
from workday_tracker.services.sessions import WorkdayState, apply_entry, order_entries


class DailySummaryRepository(Protocol):
    """Persistence interface for daily summaries."""

    def list_summaries(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailySummary]:
        """Return stored summaries with start <= day <= end."""

    def upsert_summary(self, summary: DailySummary) -> DailySummary:
        """Create or replace the summary for (user, day) and return it."""


def summarize_day(  # noqa: PLR0913
    user_id: UUID,
    day: date,
    entries: Iterable[TimeEntry],
    tz: tzinfo,
    as_of: datetime | None = None,
    summary_id: str | None = None,
) -> DailySummary:
    """Compute worked time, break time and bounds for one calendar day.

    Only entries whose local date is ``day`` take part. An interval that is
    still open after the last entry accrues up to ``as_of`` when given.

    Shifts are not carried across local midnight: a check-in late on one
    day leaves that day open, and the check-out after midnight is ignored
    because the next day starts idle.
    """
    ordered, _ = order_entries(
        entry for entry in entries if entry.timestamp.astimezone(tz).date() == day
    )

    state = WorkdayState()
    worked = 0.0
    paused = 0.0
    breaks_count = 0
    start_time: datetime | None = None
    end_time: datetime | None = None

    for entry in ordered:
        previous_status = state.status
        previous_since = state.status_since
        if not apply_entry(state, entry):
            continue
        elapsed = _seconds_between(previous_since, entry.timestamp)
        if previous_status is SessionStatus.WORKING:
            worked += elapsed
        elif previous_status is SessionStatus.PAUSED:
            paused += elapsed

        if entry.kind is EntryKind.CHECK_IN and start_time is None:
            start_time = entry.timestamp
        elif entry.kind is EntryKind.CHECK_OUT:
            end_time = entry.timestamp
        elif entry.kind.is_pause_start:
            breaks_count += 1

    if as_of is not None and state.status is not SessionStatus.IDLE:
        open_elapsed = _seconds_between(state.status_since, as_of)
        if state.status is SessionStatus.WORKING:
            worked += open_elapsed
        else:
            paused += open_elapsed

    if state.status is not SessionStatus.IDLE:
        end_time = None

    return DailySummary(
        id=summary_id or f"summary-{day.isoformat()}",
        user_id=user_id,
        day=day,
        total_worked_seconds=int(worked),
        breaks_count=breaks_count,
        breaks_total_seconds=int(paused),
        start_time=start_time,
        end_time=end_time,
    )


def _seconds_between(start: datetime | None, end: datetime) -> float:
    if start is None:
        return 0.0
    return max((end - start).total_seconds(), 0.0)
