"""Domain models for daily summaries and historical ranges."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from workday_tracker.domain.entries import TimeEntry


class Granularity(str, Enum):
    """Bucketing unit used to compute a historical range."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class DailySummary:
    """Aggregate of one user's activity for one calendar day."""

    id: str
    user_id: UUID
    day: date
    total_worked_seconds: int
    breaks_count: int
    breaks_total_seconds: int
    start_time: datetime | None
    end_time: datetime | None
    is_placeholder: bool = False

    @classmethod
    def placeholder(cls, user_id: UUID, day: date) -> "DailySummary":
        """Return a zero-valued summary for a day with entries but no row."""
        return cls(
            id=f"empty-{day.isoformat()}",
            user_id=user_id,
            day=day,
            total_worked_seconds=0,
            breaks_count=0,
            breaks_total_seconds=0,
            start_time=None,
            end_time=None,
            is_placeholder=True,
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of instants in the user's timezone."""

    start: datetime
    end: datetime

    def days(self) -> list[date]:
        """Return every calendar day in the range, ascending."""
        first = self.start.date()
        last = self.end.date()
        return [
            date.fromordinal(ordinal)
            for ordinal in range(first.toordinal(), last.toordinal() + 1)
        ]


@dataclass(frozen=True)
class RangeView:
    """Summaries and entries for a historical range."""

    date_range: DateRange
    summaries: list[DailySummary]
    entries: list[TimeEntry]

    def entries_by_day(self) -> dict[date, list[TimeEntry]]:
        """Group entries by calendar day in the range's timezone."""
        tz = self.date_range.start.tzinfo
        grouped: dict[date, list[TimeEntry]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.timestamp.astimezone(tz).date(), []).append(
                entry
            )
        return grouped
