from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock.timeclock.container import wire_services
from src.timeclock.timeclock.core.enums import PunchKind
from src.timeclock.timeclock.main import create_app


@pytest.fixture
def container(users_repo, departments_repo, punches_repo, balances_repo, adjustments_repo):
    return wire_services(
        users_repo=users_repo,
        departments_repo=departments_repo,
        punches_repo=punches_repo,
        balances_repo=balances_repo,
        adjustments_repo=adjustments_repo,
        timezone_name="America/Sao_Paulo",
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def _login(client, username: str, password: str = "secret"):
    return client.post("/login", json={"username": username, "password": password})


def test_login_and_logout(client):
    assert _login(client, "user1", "wrong").status_code == 401

    res = _login(client, "user1")
    assert res.status_code == 200
    assert res.get_json()["user"]["role"] == "employee"

    assert client.post("/logout").status_code == 200
    assert client.get("/api/punches").status_code == 401


def test_record_punch_and_status(client):
    _login(client, "user1")

    res = client.post("/api/punches", json={"latitude": -23.55, "longitude": -46.63})
    assert res.status_code == 201
    assert res.get_json()["punch"]["kind"] == "in"

    status = client.get("/api/punches/status").get_json()
    assert status["status"] == "working"
    assert status["next_kind"] == "out"

    bad = client.post("/api/punches", json={"kind": "in"})
    assert bad.status_code == 400
    assert bad.get_json()["success"] is False


def test_monthly_balance_endpoint(client, punches_repo, tz):
    punches_repo.add(1, datetime(2024, 3, 1, 8, 0, tzinfo=tz), PunchKind.IN)
    punches_repo.add(1, datetime(2024, 3, 1, 12, 0, tzinfo=tz), PunchKind.OUT)
    punches_repo.add(1, datetime(2024, 3, 1, 13, 0, tzinfo=tz), PunchKind.IN)
    punches_repo.add(1, datetime(2024, 3, 1, 17, 30, tzinfo=tz), PunchKind.OUT)
    _login(client, "user1")

    data = client.get("/api/balances/2024-03").get_json()

    assert data["balance_minutes"] == 30
    assert data["overtime_minutes"] == 30
    assert data["balance_display"] == "+0h30min"
    assert data["days"][0]["worked_minutes"] == 510

    assert client.get("/api/balances/march").status_code == 400


def test_team_report_needs_hr(client):
    _login(client, "user2")
    assert client.get("/api/reports/team/2024-03").status_code == 403

    _login(client, "user3")
    res = client.get("/api/reports/team/2024-03")
    assert res.status_code == 200
    assert res.get_json()["headcount"] == 4


def test_adjustment_round_trip(client, punches_repo, tz):
    punch = punches_repo.add(1, datetime(2024, 3, 1, 9, 0, tzinfo=tz), PunchKind.IN)

    _login(client, "user1")
    res = client.post(
        "/api/adjustments",
        json={
            "punch_id": punch.punch_id,
            "proposed_instant": "2024-03-01T08:45",
            "justification": "forgot to clock in on time",
        },
    )
    assert res.status_code == 201
    request_id = res.get_json()["request"]["request_id"]
    assert client.get("/api/adjustments/pending").status_code == 403

    _login(client, "user2")
    pending = client.get("/api/adjustments/pending").get_json()["requests"]
    assert [r["request_id"] for r in pending] == [request_id]

    assert client.post(f"/api/adjustments/{request_id}/reject", json={}).status_code == 400

    res = client.post(f"/api/adjustments/{request_id}/approve", json={})
    assert res.status_code == 200
    assert res.get_json()["punch_updated"] is True
    assert punches_repo.get_by_id(punch.punch_id).instant == datetime(2024, 3, 1, 8, 45, tzinfo=tz)

    again = client.post(f"/api/adjustments/{request_id}/reject", json={"reviewer_justification": "late"})
    assert again.status_code == 409

    assert client.post("/api/adjustments/999/approve", json={}).status_code == 404


@pytest.mark.parametrize(
    "body",
    [
        {"note": 5},
        {"photo_ref": {"path": "x"}},
        {"latitude": "nan", "longitude": "nan"},
        {"latitude": -23.55, "longitude": "inf"},
    ],
)
def test_malformed_punch_fields_are_bad_requests(client, punches_repo, body):
    _login(client, "user1")

    res = client.post("/api/punches", json=body)

    assert res.status_code == 400
    assert res.get_json()["success"] is False
    assert punches_repo.punches == {}
