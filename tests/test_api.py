"""Tests for the HTTP API."""

from datetime import UTC, datetime

from fastapi.testclient import TestClient

from workday_tracker.api.app import create_app
from workday_tracker.domain.entries import EntryKind
from tests.conftest import FakeClock


def _client(container) -> TestClient:
    return TestClient(create_app(container))


def test_health(container) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_user_is_unauthorized(container) -> None:
    client = _client(container)

    today = client.get("/today")
    created = client.post("/entries", json={"kind": "check_in"})
    history = client.get("/history", params={"date": "2024-05-15"})

    assert today.status_code == 401
    assert created.status_code == 401
    assert history.status_code == 401


def test_punch_and_read_today(container, clock: FakeClock, user_id) -> None:
    client = _client(container)
    headers = {"X-User-Id": str(user_id)}

    clock.now = datetime(2024, 5, 15, 9, tzinfo=UTC)
    created = client.post(
        "/entries", json={"kind": "check_in", "notes": "office"}, headers=headers
    )
    clock.now = datetime(2024, 5, 15, 10, tzinfo=UTC)
    client.post("/entries", json={"kind": "coffee_start"}, headers=headers)

    today = client.get("/today", headers=headers)

    assert created.status_code == 201
    assert created.json()["notes"] == "office"
    assert today.status_code == 200
    data = today.json()
    assert data["session"]["status"] == "paused"
    assert data["session"]["pause_category"] == "coffee"
    assert data["session"]["open_pauses"] == {
        "coffee": True,
        "meal": False,
        "other": False,
    }
    assert data["summary"]["start_time"].startswith("2024-05-15T09:00:00")
    assert len(data["entries"]) == 2


def test_unknown_kind_is_rejected(container, user_id) -> None:
    response = _client(container).post(
        "/entries", json={"kind": "nap_start"}, headers={"X-User-Id": str(user_id)}
    )

    assert response.status_code == 422


def test_write_failure_maps_to_bad_gateway(container, user_id) -> None:
    repository = container.time_entry_service.repository
    repository.fail_writes = True

    response = _client(container).post(
        "/entries", json={"kind": "check_in"}, headers={"X-User-Id": str(user_id)}
    )

    assert response.status_code == 502


def test_history_week_view(container, user_id) -> None:
    repository = container.time_entry_service.repository
    repository.add(user_id, EntryKind.CHECK_IN, datetime(2024, 5, 14, 9, tzinfo=UTC))

    response = _client(container).get(
        "/history",
        params={"date": "2024-05-15", "view": "week"},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 200
    data = response.json()
    assert [summary["id"] for summary in data["summaries"]] == ["empty-2024-05-14"]
    assert list(data["entries_by_day"]) == ["2024-05-14"]


def test_history_fetch_failure_maps_to_service_unavailable(
    container, user_id
) -> None:
    repository = container.history_service.entry_repository
    repository.fail_reads = True

    response = _client(container).get(
        "/history",
        params={"date": "2024-05-15", "view": "month"},
        headers={"X-User-Id": str(user_id)},
    )

    assert response.status_code == 503


def test_timer_projection(container) -> None:
    client = _client(container)

    stopped = client.get("/timer")
    future = client.get("/timer", params={"start": "2999-01-01T00:00:00Z"})

    assert stopped.json() == {"seconds": 0, "formatted": "00:00:00"}
    assert future.json() == {"seconds": 0, "formatted": "00:00:00"}


def test_update_timezone(container, user_id) -> None:
    client = _client(container)
    headers = {"X-User-Id": str(user_id)}

    ok = client.put(
        "/settings/timezone", json={"timezone": "Europe/Madrid"}, headers=headers
    )
    bad = client.put(
        "/settings/timezone", json={"timezone": "Nowhere"}, headers=headers
    )

    assert ok.status_code == 200
    assert container.user_settings_service.get_timezone(user_id) == "Europe/Madrid"
    assert bad.status_code == 400
