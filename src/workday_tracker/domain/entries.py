"""Domain models for time entries."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from workday_tracker.domain.errors import InvalidEventError


class PauseCategory(str, Enum):
    """Independent pause channels."""

    COFFEE = "coffee"
    MEAL = "meal"
    OTHER = "other"


class EntryKind(str, Enum):
    """Action recorded by a time entry, stored in the ``type`` column."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    COFFEE_START = "coffee_start"
    COFFEE_END = "coffee_end"
    MEAL_START = "meal_start"
    MEAL_END = "meal_end"
    OTHER_START = "other_start"
    OTHER_END = "other_end"

    @property
    def category(self) -> PauseCategory | None:
        """Return the pause category, or None for check-in/check-out."""
        if self in {EntryKind.CHECK_IN, EntryKind.CHECK_OUT}:
            return None
        return PauseCategory(self.value.rsplit("_", 1)[0])

    @property
    def is_pause_start(self) -> bool:
        return self.category is not None and self.value.endswith("_start")

    @property
    def is_pause_end(self) -> bool:
        return self.category is not None and self.value.endswith("_end")

    @classmethod
    def pause_start(cls, category: PauseCategory) -> "EntryKind":
        """Return the kind that opens a pause of the given category."""
        return cls(f"{category.value}_start")

    @classmethod
    def pause_end(cls, category: PauseCategory) -> "EntryKind":
        """Return the kind that closes a pause of the given category."""
        return cls(f"{category.value}_end")


@dataclass(frozen=True)
class TimeEntry:
    """One immutable attendance action in a user's log."""

    id: UUID
    user_id: UUID
    kind: EntryKind
    timestamp: datetime
    notes: str | None = None

    def to_row(self) -> dict[str, object]:
        """Return the storage row for this entry."""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "type": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
            "notes": self.notes,
        }


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def normalize_timestamp(value: object) -> datetime:
    """Return an aware UTC datetime for a datetime or ISO 8601 string.

    Naive values are read as UTC. Normalizing an already normalized value
    returns it unchanged.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            raise InvalidEventError("Empty timestamp")
        try:
            parsed = datetime.fromisoformat(cleaned)
        except ValueError as exc:
            raise InvalidEventError(f"Unparseable timestamp: {value!r}") from exc
    else:
        raise InvalidEventError(f"Unsupported timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    if parsed.tzinfo is UTC:
        return parsed
    return parsed.astimezone(UTC)


def parse_kind(value: object) -> EntryKind:
    """Return the entry kind for a raw value."""
    if isinstance(value, EntryKind):
        return value
    try:
        return EntryKind(str(value))
    except ValueError as exc:
        raise InvalidEventError(f"Unknown entry kind: {value!r}") from exc


def parse_entry(row: Mapping[str, object]) -> TimeEntry:
    """Build a TimeEntry from a storage row."""
    kind_raw = row.get("type", row.get("kind"))
    notes = row.get("notes")
    return TimeEntry(
        id=_parse_uuid(row.get("id"), "id"),
        user_id=_parse_uuid(row.get("user_id"), "user_id"),
        kind=parse_kind(kind_raw),
        timestamp=normalize_timestamp(row.get("timestamp")),
        notes=str(notes) if notes is not None else None,
    )


def _parse_uuid(value: object, field_name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidEventError(f"Invalid {field_name}: {value!r}") from exc
