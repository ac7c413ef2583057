"""Time entry registration and today's attendance state."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from workday_tracker.domain.entries import (
    EntryKind,
    TimeEntry,
    normalize_timestamp,
    parse_kind,
    utc_now,
)
from workday_tracker.domain.errors import RangeFetchError, WriteError
from workday_tracker.domain.sessions import Session
from workday_tracker.domain.summaries import DailySummary, Granularity
from workday_tracker.services.cache import Cache
from workday_tracker.services.history import TimeEntryReader, date_range
from workday_tracker.services.sessions import reconstruct_session
from workday_tracker.services.summaries import DailySummaryRepository, summarize_day
from workday_tracker.services.user_settings import UserSettingsService
from workday_tracker.services.users import require_user

logger = logging.getLogger(__name__)


class TimeEntryRepository(TimeEntryReader, Protocol):
    """Persistence interface for the append-only time entry log."""

    def append_entry(
        self,
        user_id: UUID,
        kind: EntryKind,
        timestamp: datetime,
        notes: str | None,
    ) -> TimeEntry:
        """Append an entry and return it as stored."""


@dataclass(frozen=True)
class TodaySnapshot:
    """Entries and stored summary for the user's current day."""

    day: date
    entries: list[TimeEntry]
    summary: DailySummary | None


@dataclass
class TimeEntryService:
    """Registers time entries and answers what the user is doing today."""

    repository: TimeEntryRepository
    summary_repository: DailySummaryRepository
    user_settings_service: UserSettingsService
    cache: Cache
    cache_ttl_seconds: float = 10
    clock: Callable[[], datetime] = field(default=utc_now)

    def register_entry(
        self,
        user_id: UUID | None,
        kind: EntryKind | str,
        notes: str | None = None,
        timestamp: datetime | str | None = None,
    ) -> TimeEntry:
        """Append an entry to the user's log and refresh that day's summary."""
        resolved = require_user(user_id)
        entry_kind = parse_kind(kind)
        at = normalize_timestamp(timestamp) if timestamp is not None else self.clock()
        try:
            entry = self.repository.append_entry(resolved, entry_kind, at, notes)
        except Exception as exc:
            logger.exception(
                "Failed to append time entry",
                extra={"user_id": str(resolved), "kind": entry_kind.value},
            )
            raise WriteError("Failed to register time entry") from exc

        self._update_day_summary(resolved, entry)
        self.cache.invalidate(_today_key(resolved))
        return entry

    def refresh_today(self, user_id: UUID | None, force: bool = False) -> TodaySnapshot:
        """Return today's entries and summary, served from cache when fresh."""
        resolved = require_user(user_id)
        return self.cache.get_or_load(
            _today_key(resolved),
            lambda: self._load_today(resolved),
            self.cache_ttl_seconds,
            force=force,
        )

    def get_current_session(
        self, user_id: UUID | None, force: bool = False
    ) -> Session:
        """Reconstruct the user's attendance session for today."""
        snapshot = self.refresh_today(user_id, force=force)
        return reconstruct_session(snapshot.entries)

    def _load_today(self, user_id: UUID) -> TodaySnapshot:
        try:
            tz = self.user_settings_service.get_zone(user_id)
            today = self.clock().astimezone(tz).date()
            period = date_range(today, Granularity.DAY, tz)
            entries = self.repository.list_entries(user_id, period.start, period.end)
            summaries = self.summary_repository.list_summaries(user_id, today, today)
        except Exception as exc:
            logger.exception(
                "Failed to load today's entries", extra={"user_id": str(user_id)}
            )
            raise RangeFetchError("Failed to load today's entries") from exc
        summary = next((item for item in summaries if item.day == today), None)
        return TodaySnapshot(day=today, entries=entries, summary=summary)

    def _update_day_summary(self, user_id: UUID, entry: TimeEntry) -> None:
        try:
            tz = self.user_settings_service.get_zone(user_id)
            day = entry.timestamp.astimezone(tz).date()
            period = date_range(day, Granularity.DAY, tz)
            entries = self.repository.list_entries(user_id, period.start, period.end)
            if entry not in entries:
                entries = [*entries, entry]
            self.summary_repository.upsert_summary(
                summarize_day(user_id, day, entries, tz)
            )
        except Exception:
            logger.exception(
                "Failed to update daily summary", extra={"user_id": str(user_id)}
            )


def _today_key(user_id: UUID) -> str:
    return f"today:{user_id}"
