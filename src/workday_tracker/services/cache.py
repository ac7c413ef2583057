"""Short-lived read-through cache."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol, TypeVar

from workday_tracker.domain.entries import utc_now

T = TypeVar("T")


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL in seconds."""

    def invalidate(self, key: str) -> None:
        """Drop a cached value."""

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], T],
        ttl_seconds: float,
        force: bool = False,
    ) -> T:
        """Return a fresh cached value or load, store and return a new one."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


class InMemoryCache(Cache):
    """In-process cache with per-entry freshness windows."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._entries: dict[str, _CacheEntry] = {}
        self._clock = clock

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: float) -> None:
        """Store a cached value with a TTL."""
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def invalidate(self, key: str) -> None:
        """Drop a cached value if present."""
        self._entries.pop(key, None)

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], T],
        ttl_seconds: float,
        force: bool = False,
    ) -> T:
        """Return the cached value, bypassing the cache when ``force`` is set."""
        if not force:
            cached = self.get(key)
            if cached is not None:
                return cached  # type: ignore[return-value]
        value = loader()
        self.set(key, value, ttl_seconds)
        return value
