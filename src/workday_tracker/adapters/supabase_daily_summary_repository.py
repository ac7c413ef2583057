"""Supabase repository for daily summaries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from workday_tracker.domain.entries import normalize_timestamp
from workday_tracker.domain.summaries import DailySummary
from workday_tracker.services.summaries import DailySummaryRepository


@dataclass
class SupabaseDailySummaryRepository(DailySummaryRepository):
    """Supabase implementation for per-day summaries."""

    client: Client

    def list_summaries(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailySummary]:
        """Return stored summaries for the inclusive day range."""
        response = (
            self.client.table("daily_summaries")
            .select(
                "id, user_id, date, total_time, start_time, end_time, "
                "breaks_count, breaks_time"
            )
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def upsert_summary(self, summary: DailySummary) -> DailySummary:
        """Write the summary for (user_id, date), replacing any existing row."""
        response = (
            self.client.table("daily_summaries")
            .upsert(
                {
                    "user_id": str(summary.user_id),
                    "date": summary.day.isoformat(),
                    "total_time": summary.total_worked_seconds,
                    "start_time": _iso_or_none(summary.start_time),
                    "end_time": _iso_or_none(summary.end_time),
                    "breaks_count": summary.breaks_count,
                    "breaks_time": summary.breaks_total_seconds,
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store daily summary")
        return _parse_row(response.data[0])


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_optional_timestamp(value: object) -> datetime | None:
    if value in (None, ""):
        return None
    return normalize_timestamp(value)


def _parse_row(row: dict[str, object]) -> DailySummary:
    return DailySummary(
        id=str(row["id"]),
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])[:10]),
        total_worked_seconds=int(row.get("total_time") or 0),
        breaks_count=int(row.get("breaks_count") or 0),
        breaks_total_seconds=int(row.get("breaks_time") or 0),
        start_time=_parse_optional_timestamp(row.get("start_time")),
        end_time=_parse_optional_timestamp(row.get("end_time")),
    )
