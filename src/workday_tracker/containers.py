"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from workday_tracker.adapters.supabase_daily_summary_repository import (
    SupabaseDailySummaryRepository,
)
from workday_tracker.adapters.supabase_time_entry_repository import (
    SupabaseTimeEntryRepository,
)
from workday_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from workday_tracker.config import Settings
from workday_tracker.services.cache import InMemoryCache
from workday_tracker.services.entries import TimeEntryService
from workday_tracker.services.history import HistoryService
from workday_tracker.services.timer import ElapsedTimer
from workday_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_settings_service: UserSettingsService
    time_entry_service: TimeEntryService
    history_service: HistoryService
    elapsed_timer: ElapsedTimer


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseTimeEntryRepository(supabase_client)
    summary_repository = SupabaseDailySummaryRepository(supabase_client)
    user_settings_service = UserSettingsService(
        SupabaseUserSettingsRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    time_entry_service = TimeEntryService(
        repository=entry_repository,
        summary_repository=summary_repository,
        user_settings_service=user_settings_service,
        cache=InMemoryCache(),
        cache_ttl_seconds=resolved_settings.today_cache_ttl_seconds,
    )
    history_service = HistoryService(
        entry_repository=entry_repository,
        summary_repository=summary_repository,
        user_settings_service=user_settings_service,
        week_start=resolved_settings.week_start,
    )
    return AppContainer(
        settings=resolved_settings,
        user_settings_service=user_settings_service,
        time_entry_service=time_entry_service,
        history_service=history_service,
        elapsed_timer=ElapsedTimer(resolved_settings.timer_interval_seconds),
    )
