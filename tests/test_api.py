import json
from datetime import date

import pytest

from attendflow.core.enums import AttendanceStatus, Department
from attendflow.insights.prompts import MISSING_KEY_MESSAGE
from attendflow.main import create_app

FIRST_CS_STUDENT = "mock-CS-1"  # never has a record today in the demo data


@pytest.fixture
def app():
    app = create_app("attendflow.config.testing")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id):
    resp = client.post("/api/login", json={"user_id": user_id})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def test_healthz_reports_memory_store(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "store": "MEMORY"}


def test_login_screen_lists_demo_users(client):
    users = client.get("/api/users").get_json()["users"]
    assert len(users) == 4 + 25 + 15 + 10 + 8
    assert users[0]["role"] != "STUDENT"


def test_requests_without_session_are_401(client):
    assert client.get("/api/me").status_code == 401
    assert client.post("/api/attendance/scan", json={"unavailable": True}).status_code == 401


def test_unknown_user_cannot_log_in(client):
    resp = client.post("/api/login", json={"user_id": "ghost"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_student_scan_cycle(client):
    body = login(client, FIRST_CS_STUDENT)
    assert body["views"] == ["dashboard", "reports"]

    assert client.get("/api/attendance/today").get_json()["state"] == "NONE"

    first = client.post("/api/attendance/scan", json={"unavailable": True}).get_json()
    assert first["action"] == "CHECK_IN"
    assert first["simulated"] is True
    assert first["fallback_reason"] == "POSITION_UNAVAILABLE"
    assert client.get("/api/attendance/today").get_json()["state"] == "OPEN"

    second = client.post("/api/attendance/scan", json={"lat": 37.7751, "lng": -122.4193}).get_json()
    assert second["action"] == "CHECK_OUT"
    assert second["record"]["id"] == first["record"]["id"]

    third = client.post("/api/attendance/scan", json={"lat": 37.7751, "lng": -122.4193})
    assert third.status_code == 409


def test_malformed_reading_is_400(client):
    login(client, FIRST_CS_STUDENT)
    resp = client.post("/api/attendance/scan", json={"lat": 500, "lng": 0})
    assert resp.status_code == 400


def test_non_object_bodies_are_400(client):
    assert client.post("/api/login", json=["u1"]).status_code == 400

    login(client, FIRST_CS_STUDENT)
    resp = client.post("/api/attendance/scan", json=[37.77, -122.41])
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert client.get("/api/attendance/today").get_json()["state"] == "NONE"

    login(client, "u3")
    assert client.post("/api/insights", json=["Who is often late?"]).status_code == 400


def test_admin_cannot_scan(client):
    login(client, "u2")
    assert client.post("/api/attendance/scan", json={"unavailable": True}).status_code == 403


def test_student_sees_only_own_records(client):
    login(client, "mock-EE-2")
    records = client.get("/api/attendance").get_json()["records"]
    assert records
    assert {r["user_id"] for r in records} == {"mock-EE-2"}


def test_dashboard_for_admin_and_bad_month(client):
    login(client, "u2")
    resp = client.get("/api/dashboard")
    assert resp.status_code == 200
    dash = resp.get_json()["dashboard"]
    assert dash["is_individual"] is False
    assert set(dash["department_breakdown"]) == {"CS", "EE", "ME", "BA"}
    assert dash["department_breakdown"]["EE"] == 0

    individual = client.get("/api/dashboard?user=mock-CS-3&month=1&year=2024").get_json()["dashboard"]
    assert individual["is_individual"] is True
    assert len(individual["calendar"]) == 31
    assert individual["department_breakdown"] == {}
    assert individual["monthly_comparison"] == []

    assert client.get("/api/dashboard?month=13").status_code == 400
    assert client.get("/api/dashboard?month=abc").status_code == 400


def test_audit_is_super_admin_only(client):
    login(client, "u3")
    assert client.get("/api/audit").status_code == 403

    login(client, "u1")
    logs = client.get("/api/audit").get_json()["logs"]
    assert logs[0]["action"] == "USER_LOGIN"
    assert logs[0]["details"] == "User super@eduno.com logged in successfully."


def test_insights_without_key(client):
    login(client, "mock-CS-2")
    assert client.post("/api/insights", json={"query": "hi"}).status_code == 403

    login(client, "u3")
    body = client.post("/api/insights", json={"query": "Who is often late?"}).get_json()
    assert body["answer"] == MISSING_KEY_MESSAGE
    assert body["configured"] is False

    assert client.post("/api/insights", json={"query": ""}).status_code == 400


def test_client_config_exposes_geofence(client):
    cfg = client.get("/api/config").get_json()
    assert cfg["geofence"]["name"] == "Main Campus"
    assert cfg["geofence"]["radius_meters"] == 2000.0
    assert cfg["position_timeout_ms"] == 5000


def test_logout_clears_session(client):
    login(client, "u4")
    assert client.get("/api/me").get_json()["can_check_in"] is True
    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_stream_pushes_own_record_changes(app, client, make_record):
    login(client, FIRST_CS_STUDENT)
    resp = client.get("/api/attendance/stream")
    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"

    chunks = iter(resp.response)
    assert next(chunks) == b": keep-alive\n\n"

    repo = app.extensions["attendflow"].attendance_repo
    today = date.today()
    repo.create_attendance(
        make_record("mock-EE-1", today, AttendanceStatus.PRESENT, "07:40", department=Department.EE, record_id="ee")
    )
    repo.create_attendance(make_record(FIRST_CS_STUDENT, today, AttendanceStatus.PRESENT, "07:45", record_id="own"))

    event = next(chunks).decode()
    assert event.startswith("event: attendance\n")
    assert json.loads(event.split("data: ", 1)[1])["id"] == "own"
    resp.close()


def test_stream_requires_session(client):
    assert client.get("/api/attendance/stream").status_code == 401
