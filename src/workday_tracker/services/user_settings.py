"""User settings service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from workday_tracker.services.users import require_user


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_timezone(self, user_id: UUID) -> str | None:
        """Return the user's timezone if set."""

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Update the user's timezone."""


@dataclass
class UserSettingsService:
    """Service for user settings."""

    repository: UserSettingsRepository
    default_timezone: str = "UTC"

    def get_timezone(self, user_id: UUID | None) -> str:
        """Return the user timezone or the default if unset."""
        resolved = require_user(user_id)
        return self.repository.get_timezone(resolved) or self.default_timezone

    def get_zone(self, user_id: UUID | None) -> ZoneInfo:
        """Return the user's timezone as a ZoneInfo."""
        return ZoneInfo(self.get_timezone(user_id))

    def set_timezone(self, user_id: UUID | None, timezone: str) -> None:
        """Persist a user's timezone after checking it is a known zone."""
        resolved = require_user(user_id)
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {timezone}") from exc
        self.repository.set_timezone(resolved, timezone)
