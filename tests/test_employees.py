import pytest

ANA = {"name": "Ana", "email": "ana@x.com", "role": "tech", "department": "ops"}


def create(client, headers, **fields):
    return client.post("/api/employees", json={**ANA, **fields}, headers=headers)


def test_create_then_list(client, auth_headers):
    res = create(client, auth_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["id"]

    employees = client.get("/api/employees", headers=auth_headers).json()
    match = [e for e in employees if e["id"] == body["id"]]
    assert len(match) == 1
    employee = match[0]
    for field, value in ANA.items():
        assert employee[field] == value
    assert "createdAt" in employee


def test_list_is_empty_initially(client, auth_headers):
    res = client.get("/api/employees", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == []


def test_list_keeps_creation_order(client, auth_headers):
    ids = [create(client, auth_headers, name=name).json()["id"] for name in ["A", "B", "C"]]
    listed = client.get("/api/employees", headers=auth_headers).json()
    assert [e["id"] for e in listed] == ids


@pytest.mark.parametrize("missing", ["name", "email", "role", "department"])
def test_create_requires_all_fields(client, auth_headers, missing):
    payload = {k: v for k, v in ANA.items() if k != missing}
    res = client.post("/api/employees", json=payload, headers=auth_headers)
    assert res.status_code == 400
    assert missing in res.json()["error"]


def test_update_merges_fields(client, auth_headers):
    employee_id = create(client, auth_headers).json()["id"]
    res = client.put(f"/api/employees/{employee_id}", json={"role": "lead"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["success"] is True

    employee = client.get("/api/employees", headers=auth_headers).json()[0]
    assert employee["role"] == "lead"
    assert employee["name"] == "Ana"
    assert employee["email"] == "ana@x.com"
    assert employee["department"] == "ops"
    assert "createdAt" in employee
    assert "updatedAt" in employee


def test_update_without_fields(client, auth_headers):
    employee_id = create(client, auth_headers).json()["id"]
    res = client.put(f"/api/employees/{employee_id}", json={}, headers=auth_headers)
    assert res.status_code == 400


def test_delete(client, auth_headers):
    employee_id = create(client, auth_headers).json()["id"]
    res = client.delete(f"/api/employees/{employee_id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Employee deleted"}
    assert client.get("/api/employees", headers=auth_headers).json() == []


def test_delete_unknown_employee_succeeds(client, auth_headers):
    res = client.delete("/api/employees/does-not-exist", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["success"] is True


def test_invalid_employee_id(client, auth_headers):
    res = client.delete("/api/employees/bad.id", headers=auth_headers)
    assert res.status_code == 400


@pytest.mark.parametrize("field", ["name", "email", "role", "department"])
def test_update_cannot_blank_required_fields(client, auth_headers, field):
    employee_id = create(client, auth_headers).json()["id"]
    res = client.put(f"/api/employees/{employee_id}", json={field: ""}, headers=auth_headers)
    assert res.status_code == 400
    assert field in res.json()["error"]

    employee = client.get("/api/employees", headers=auth_headers).json()[0]
    assert employee[field] == ANA[field]
