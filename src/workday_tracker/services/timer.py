"""Live elapsed-time projection for a running workday or pause."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from workday_tracker.domain.entries import normalize_timestamp, utc_now

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class ElapsedTime:
    """Whole seconds elapsed since a start instant, with display form."""

    seconds: int
    formatted: str


def elapsed_seconds(start: datetime, now: datetime) -> int:
    """Return floored whole seconds from start to now, never negative."""
    delta = (now - start).total_seconds()
    if delta <= 0:
        return 0
    return int(delta)


def format_elapsed(seconds: int) -> str:
    """Render seconds as HH:MM:SS; hours are not wrapped at 24."""
    seconds = max(seconds, 0)
    hours, remainder = divmod(seconds, SECONDS_PER_HOUR)
    minutes, secs = divmod(remainder, SECONDS_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def project_elapsed(
    start: datetime | str | None, now: datetime | str | None = None
) -> ElapsedTime:
    """Project the elapsed time since ``start``; no start means a stopped timer.

    Both instants go through ``normalize_timestamp``, so naive values are
    read as UTC and ISO strings are accepted.
    """
    if start is None:
        return ElapsedTime(seconds=0, formatted=format_elapsed(0))
    started = normalize_timestamp(start)
    current = normalize_timestamp(now) if now is not None else utc_now()
    seconds = elapsed_seconds(started, current)
    return ElapsedTime(seconds=seconds, formatted=format_elapsed(seconds))


class TimerSubscription:
    """Handle for a periodic elapsed-time projection."""

    def __init__(self, task: "asyncio.Task[None]") -> None:
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        """Stop future ticks; values already delivered are untouched."""
        self._task.cancel()


@dataclass
class ElapsedTimer:
    """Invokes a callback with the projected elapsed time on a fixed interval."""

    interval_seconds: float = 1.0
    clock: Callable[[], datetime] = utc_now

    def subscribe(
        self,
        start: datetime | str | None,
        callback: Callable[[ElapsedTime], None],
    ) -> TimerSubscription:
        """Start ticking on the running event loop and return the handle."""
        started = normalize_timestamp(start) if start is not None else None
        task = asyncio.get_running_loop().create_task(self._run(started, callback))
        return TimerSubscription(task)

    async def _run(
        self,
        start: datetime | None,
        callback: Callable[[ElapsedTime], None],
    ) -> None:
        while True:
            try:
                callback(project_elapsed(start, self.clock()))
            except Exception:
                logger.exception("Elapsed timer callback failed")
            await asyncio.sleep(self.interval_seconds)
