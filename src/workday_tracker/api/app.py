"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from workday_tracker.api.models import (
    ElapsedOut,
    EntryCreate,
    EntryOut,
    HistoryOut,
    SessionOut,
    SummaryOut,
    TimezoneUpdate,
    TodayOut,
)
from workday_tracker.app_logging import configure_logging
from workday_tracker.containers import AppContainer
from workday_tracker.domain.entries import normalize_timestamp
from workday_tracker.domain.errors import (
    InvalidEventError,
    NotAuthenticatedError,
    RangeFetchError,
    WriteError,
)
from workday_tracker.domain.summaries import Granularity
from workday_tracker.services.sessions import reconstruct_session
from workday_tracker.services.timer import project_elapsed


def get_user_id(x_user_id: str | None = Header(default=None)) -> UUID | None:
    """Return the caller identity forwarded by the auth layer, if any."""
    if not x_user_id:
        return None
    try:
        return UUID(x_user_id)
    except ValueError:
        return None


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting workday tracker (%s)", container.settings.environment)
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated(_: Request, exc: NotAuthenticatedError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)}
        )

    @app.exception_handler(InvalidEventError)
    async def invalid_event(_: Request, exc: InvalidEventError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(WriteError)
    async def write_failed(_: Request, exc: WriteError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)}
        )

    @app.exception_handler(RangeFetchError)
    async def fetch_failed(_: Request, exc: RangeFetchError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        payload: EntryCreate,
        user_id: UUID | None = Depends(get_user_id),
        state_container: AppContainer = Depends(get_container),
    ) -> EntryOut:
        """Punch a new time entry for the caller."""
        entry = state_container.time_entry_service.register_entry(
            user_id, payload.kind, notes=payload.notes
        )
        logger.info(
            "Registered time entry",
            extra={"user_id": str(entry.user_id), "kind": entry.kind.value},
        )
        return EntryOut.from_entry(entry)

    @app.get("/today")
    async def today(
        force: bool = False,
        user_id: UUID | None = Depends(get_user_id),
        state_container: AppContainer = Depends(get_container),
    ) -> TodayOut:
        """Return the caller's current session and today's activity."""
        snapshot = state_container.time_entry_service.refresh_today(
            user_id, force=force
        )
        session = reconstruct_session(snapshot.entries)
        return TodayOut(
            day=snapshot.day,
            session=SessionOut.from_session(session),
            summary=(
                SummaryOut.from_summary(snapshot.summary) if snapshot.summary else None
            ),
            entries=[EntryOut.from_entry(entry) for entry in snapshot.entries],
        )

    @app.get("/history")
    async def history(
        date: date,  # noqa: A002
        view: Granularity = Granularity.DAY,
        user_id: UUID | None = Depends(get_user_id),
        state_container: AppContainer = Depends(get_container),
    ) -> HistoryOut:
        """Return summaries and entries for the day, week or month of a date."""
        range_view = state_container.history_service.get_range_view(
            user_id, date, view
        )
        return HistoryOut.from_view(view, range_view)

    @app.get("/timer")
    async def timer(start: str | None = None) -> ElapsedOut:
        """Project the elapsed time since a start instant."""
        start_at = normalize_timestamp(start) if start else None
        return ElapsedOut.from_elapsed(project_elapsed(start_at))

    @app.put("/settings/timezone")
    async def update_timezone(
        payload: TimezoneUpdate,
        user_id: UUID | None = Depends(get_user_id),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, str]:
        """Store the caller's timezone used for day bucketing."""
        try:
            state_container.user_settings_service.set_timezone(
                user_id, payload.timezone
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {"timezone": payload.timezone}

    return app
