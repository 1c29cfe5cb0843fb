from __future__ import annotations

from collections.abc import Generator
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine

from app import main as app_main
from app.domain.calendar import format_jalali_date
from app.domain.models import now_local
from app.infra import audit, db, events


@pytest.fixture()
def dashboard_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "dashboard_test.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: object, _connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(test_engine)
    monkeypatch.setattr(db, "engine", test_engine)
    monkeypatch.setattr(audit, "engine", test_engine)
    monkeypatch.setattr(events, "engine", test_engine)
    client = TestClient(app_main.app)
    yield client
    client.close()


def _auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _create_inspector(client: TestClient, name: str) -> str:
    response = client.post("/api/registry/inspectors", json={"name": name})
    assert response.status_code == 201
    return response.json()["id"]


def _login(client: TestClient, inspector_id: str | None = None) -> str:
    if inspector_id is None:
        payload = {"role": "super_admin"}
    else:
        payload = {"role": "inspector", "inspector_id": inspector_id}
    response = client.post("/api/identity/login", json=payload)
    assert response.status_code == 200
    return response.json()["access_token"]


def _days_ago(days: int) -> str:
    return format_jalali_date(now_local() - timedelta(days=days))


def _create_scaffold(client: TestClient, token: str, unit: str, days_ago: int, color: str) -> str:
    response = client.post(
        "/api/registry/scaffolds",
        json={"unit": unit, "tag_number": f"{unit}-{days_ago}", "inspection_date": _days_ago(days_ago), "tag_color": color},
        headers=_auth_header(token),
    )
    assert response.status_code == 201
    return response.json()["id"]


def _create_past_reminder(client: TestClient, token: str) -> str:
    past = now_local() - timedelta(hours=1)
    response = client.post(
        "/api/reminders",
        json={"date": format_jalali_date(past), "time": past.strftime("%H:%M")},
        headers=_auth_header(token),
    )
    assert response.status_code == 201
    return response.json()["id"]


def _seed(client: TestClient) -> tuple[str, str]:
    first_id = _create_inspector(client, "Sara")
    second_id = _create_inspector(client, "Omid")
    first_token = _login(client, first_id)
    second_token = _login(client, second_id)

    _create_scaffold(client, first_token, "Unit B", 45, "green")
    _create_scaffold(client, first_token, "Unit A", 12, "yellow")
    _create_scaffold(client, first_token, "Unit B", 2, "yellow")
    _create_scaffold(client, first_token, "Unit C", 300, "red")
    _create_past_reminder(client, first_token)

    _create_scaffold(client, second_token, "Unit Z", 40, "green")
    return first_id, second_id


def test_summary_for_inspector(dashboard_client: TestClient) -> None:
    first_id, _ = _seed(dashboard_client)
    token = _login(dashboard_client, first_id)

    response = dashboard_client.get("/api/dashboard/summary", headers=_auth_header(token))
    assert response.status_code == 200
    body = response.json()
    assert body["inspector_id"] == first_id
    assert body["total_scaffolds"] == 4
    assert body["tag_distribution"] == {"green": 1, "yellow": 2, "red": 1}
    assert body["unit_counts"] == [
        {"unit": "Unit B", "count": 2},
        {"unit": "Unit A", "count": 1},
        {"unit": "Unit C", "count": 1},
    ]
    assert [item["overdue_days"] for item in body["smart_reminders"]] == [15, 5]
    assert body["smart_reminders"][0]["scaffold"]["unit"] == "Unit B"
    assert body["overdue_smart_count"] == 2
    assert body["pending_manual_count"] == 1
    assert len(body["pending_manual_reminders"]) == 1
    assert body["sort_key"] == "overdue_days"
    assert body["sort_direction"] == "descending"


def test_smart_reminders_sorting(dashboard_client: TestClient) -> None:
    first_id, _ = _seed(dashboard_client)
    token = _login(dashboard_client, first_id)

    ascending = dashboard_client.get(
        "/api/dashboard/smart-reminders",
        params={"sort_key": "overdue_days", "sort_direction": "ascending"},
        headers=_auth_header(token),
    )
    assert [item["overdue_days"] for item in ascending.json()] == [5, 15]

    by_unit = dashboard_client.get(
        "/api/dashboard/smart-reminders",
        params={"sort_key": "unit", "sort_direction": "ascending"},
        headers=_auth_header(token),
    )
    assert [item["scaffold"]["unit"] for item in by_unit.json()] == ["Unit A", "Unit B"]

    bad = dashboard_client.get(
        "/api/dashboard/smart-reminders",
        params={"sort_key": "color"},
        headers=_auth_header(token),
    )
    assert bad.status_code == 422


def test_badges_for_admin_cover_all_inspectors(dashboard_client: TestClient) -> None:
    _, second_id = _seed(dashboard_client)
    admin_token = _login(dashboard_client)

    everyone = dashboard_client.get("/api/dashboard/badges", headers=_auth_header(admin_token))
    assert everyone.status_code == 200
    assert everyone.json() == {"overdue_smart_count": 3, "pending_manual_count": 1}

    one = dashboard_client.get(
        "/api/dashboard/badges",
        params={"inspector_id": second_id},
        headers=_auth_header(admin_token),
    )
    assert one.json() == {"overdue_smart_count": 1, "pending_manual_count": 0}

    summary = dashboard_client.get("/api/dashboard/summary", headers=_auth_header(admin_token))
    assert summary.json()["inspector_id"] is None
    assert summary.json()["total_scaffolds"] == 5


def test_reporting_is_admin_only(dashboard_client: TestClient) -> None:
    first_id, _ = _seed(dashboard_client)
    token = _login(dashboard_client, first_id)
    for path in ("/api/reporting/inspectors", "/api/reporting/scaffolds", "/api/reporting/reminders"):
        assert dashboard_client.get(path, headers=_auth_header(token)).status_code == 403


def test_reporting_counts_periods_and_active_reminders(dashboard_client: TestClient) -> None:
    first_id, second_id = _seed(dashboard_client)
    idle_id = _create_inspector(dashboard_client, "Idle")
    admin_token = _login(dashboard_client)

    counts = dashboard_client.get("/api/reporting/inspectors", headers=_auth_header(admin_token))
    assert counts.status_code == 200
    assert [(item["inspector_id"], item["scaffold_count"]) for item in counts.json()] == [
        (first_id, 4),
        (second_id, 1),
        (idle_id, 0),
    ]

    weekly = dashboard_client.get(
        "/api/reporting/scaffolds",
        params={"period": "weekly"},
        headers=_auth_header(admin_token),
    ).json()
    assert weekly["period"] == "weekly"
    assert weekly["total_scaffolds"] == 1
    assert [group["name"] for group in weekly["inspectors"]] == ["Sara"]

    monthly = dashboard_client.get(
        "/api/reporting/scaffolds",
        params={"period": "monthly"},
        headers=_auth_header(admin_token),
    ).json()
    assert monthly["total_scaffolds"] == 2
    assert sorted(item["unit"] for item in monthly["inspectors"][0]["scaffolds"]) == ["Unit A", "Unit B"]

    active = dashboard_client.get("/api/reporting/reminders", headers=_auth_header(admin_token))
    assert active.status_code == 200
    assert [item["inspector_name"] for item in active.json()] == ["Sara"]
