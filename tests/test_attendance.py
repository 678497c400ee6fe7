from datetime import datetime, timezone

from services.config import ATTENDANCE


def test_log_login_then_read(client, auth_headers):
    res = client.post("/api/attendance/login", json={"employeeId": "emp1"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["success"] is True

    entries = client.get("/api/attendance/emp1", headers=auth_headers).json()
    assert len(entries) == 1
    entry = entries[0]
    assert entry["date"] == datetime.now(timezone.utc).date().isoformat()
    assert entry["status"] == "present"
    assert entry["loginTime"].startswith(entry["date"])


def test_second_login_same_day_overwrites(client, auth_headers, store):
    client.post("/api/attendance/login", json={"employeeId": "emp1"}, headers=auth_headers)
    client.post(
        "/api/attendance/login", json={"employeeId": "emp1", "status": "late"}, headers=auth_headers
    )
    entries = client.get("/api/attendance/emp1", headers=auth_headers).json()
    assert len(entries) == 1
    assert entries[0]["status"] == "late"


def test_entries_are_keyed_by_date_string(client, auth_headers, store):
    client.post("/api/attendance/login", json={"employeeId": "emp1"}, headers=auth_headers)
    day = datetime.now(timezone.utc).date().isoformat()
    assert list(store.read_all(f"{ATTENDANCE}/emp1")) == [day]


def test_entries_sorted_by_date(client, auth_headers, store):
    store.set_at(f"{ATTENDANCE}/emp1/2024-01-02", {"loginTime": "b", "status": "present"})
    store.set_at(f"{ATTENDANCE}/emp1/2024-01-01", {"loginTime": "a", "status": "present"})
    entries = client.get("/api/attendance/emp1", headers=auth_headers).json()
    assert [e["date"] for e in entries] == ["2024-01-01", "2024-01-02"]


def test_unknown_employee_has_no_entries(client, auth_headers):
    res = client.get("/api/attendance/nobody", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == []


def test_log_login_requires_employee_id(client, auth_headers):
    res = client.post("/api/attendance/login", json={}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "employeeId is required"


def test_log_login_rejects_bad_employee_id(client, auth_headers):
    res = client.post("/api/attendance/login", json={"employeeId": "a/b"}, headers=auth_headers)
    assert res.status_code == 400
