"""Supabase repository for the time entry log."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from workday_tracker.domain.entries import EntryKind, TimeEntry, parse_entry
from workday_tracker.domain.errors import InvalidEventError
from workday_tracker.services.entries import TimeEntryRepository

logger = logging.getLogger(__name__)


@dataclass
class SupabaseTimeEntryRepository(TimeEntryRepository):
    """Supabase implementation for appending and reading time entries."""

    client: Client

    def append_entry(
        self,
        user_id: UUID,
        kind: EntryKind,
        timestamp: datetime,
        notes: str | None,
    ) -> TimeEntry:
        """Insert an entry row and return it as stored."""
        response = (
            self.client.table("time_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "type": kind.value,
                    "timestamp": timestamp.isoformat(),
                    "notes": notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create time entry")
        return parse_entry(response.data[0])

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[TimeEntry]:
        """Return entries in the inclusive time range, oldest first."""
        response = (
            self.client.table("time_entries")
            .select("id, user_id, type, timestamp, notes")
            .eq("user_id", str(user_id))
            .gte("timestamp", start.isoformat())
            .lte("timestamp", end.isoformat())
            .order("timestamp", desc=False)
            .execute()
        )
        entries: list[TimeEntry] = []
        for row in response.data or []:
            try:
                entries.append(parse_entry(row))
            except InvalidEventError as exc:
                logger.warning(
                    "Skipping malformed time entry row: %s",
                    exc,
                    extra={"user_id": str(user_id)},
                )
        return entries
