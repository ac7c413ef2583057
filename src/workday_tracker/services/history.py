"""Historical range views over time entries and daily summaries."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Protocol
from uuid import UUID

from workday_tracker.domain.entries import TimeEntry
from workday_tracker.domain.errors import RangeFetchError
from workday_tracker.domain.summaries import (
    DailySummary,
    DateRange,
    Granularity,
    RangeView,
)
from workday_tracker.services.sessions import order_entries
from workday_tracker.services.summaries import DailySummaryRepository
from workday_tracker.services.user_settings import UserSettingsService
from workday_tracker.services.users import require_user

DECEMBER = 12

logger = logging.getLogger(__name__)


class TimeEntryReader(Protocol):
    """Read side of the time entry log."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[TimeEntry]:
        """Return entries with start <= timestamp <= end, ascending."""


def date_range(
    reference_date: date,
    granularity: Granularity,
    tz: tzinfo,
    week_start: int = 0,
) -> DateRange:
    """Return the inclusive instant range containing ``reference_date``.

    ``week_start`` follows ``date.weekday()``: 0 is Monday, 6 is Sunday.
    """
    if granularity is Granularity.DAY:
        first = last = reference_date
    elif granularity is Granularity.WEEK:
        offset = (reference_date.weekday() - week_start) % 7
        first = reference_date - timedelta(days=offset)
        last = first + timedelta(days=6)
    else:
        first = reference_date.replace(day=1)
        if first.month == DECEMBER:
            following = first.replace(year=first.year + 1, month=1)
        else:
            following = first.replace(month=first.month + 1)
        last = following - timedelta(days=1)
    return DateRange(
        start=datetime.combine(first, time.min, tzinfo=tz),
        end=datetime.combine(last, time.max, tzinfo=tz),
    )


def build_summaries(
    user_id: UUID,
    days: list[date],
    summaries: list[DailySummary],
    entries: list[TimeEntry],
    tz: tzinfo,
) -> list[DailySummary]:
    """Pick one summary per day, synthesizing placeholders for days with entries.

    Days with neither a stored summary nor entries are left out.
    """
    stored = {summary.day: summary for summary in summaries}
    active_days = {entry.timestamp.astimezone(tz).date() for entry in entries}
    result: list[DailySummary] = []
    for day in days:
        existing = stored.get(day)
        if existing is not None:
            result.append(existing)
        elif day in active_days:
            result.append(DailySummary.placeholder(user_id, day))
    return result


@dataclass
class HistoryService:
    """Builds day, week and month views of a user's attendance."""

    entry_repository: TimeEntryReader
    summary_repository: DailySummaryRepository
    user_settings_service: UserSettingsService
    week_start: int = 0

    def get_range_view(
        self,
        user_id: UUID | None,
        reference_date: date,
        granularity: Granularity,
    ) -> RangeView:
        """Return summaries and entries for the range containing a date."""
        resolved = require_user(user_id)
        try:
            tz = self.user_settings_service.get_zone(resolved)
            period = date_range(reference_date, granularity, tz, self.week_start)
            raw_entries = self.entry_repository.list_entries(
                resolved, period.start, period.end
            )
            summaries = self.summary_repository.list_summaries(
                resolved, period.start.date(), period.end.date()
            )
        except Exception as exc:
            logger.exception(
                "Failed to fetch history range",
                extra={"user_id": str(resolved), "granularity": granularity.value},
            )
            raise RangeFetchError(
                f"Failed to load {granularity.value} view for {reference_date}"
            ) from exc

        entries, _ = order_entries(raw_entries)
        return RangeView(
            date_range=period,
            summaries=build_summaries(resolved, period.days(), summaries, entries, tz),
            entries=entries,
        )
