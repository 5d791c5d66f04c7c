from __future__ import annotations

import io

import pandas as pd


def _create_student(client, **overrides):
    payload = {
        "firstName": "Asha",
        "lastName": "Rao",
        "section": "A",
        "gender": "female",
        "mobile": "9811111111",
    }
    payload.update(overrides)
    return client.post("/api/students", json=payload)


def test_login_and_current_user(client, login):
    assert client.get("/api/user").status_code == 401

    res = login()
    assert res.status_code == 200
    assert res.get_json()["role"] == "superadmin"

    me = client.get("/api/user").get_json()
    assert me["username"] == "admin"

    client.post("/api/logout")
    assert client.get("/api/user").status_code == 401


def test_login_with_wrong_password_is_401(client, login):
    res = login(password="nope")
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid credentials"


def test_protected_routes_require_login(client):
    assert client.get("/api/students").status_code == 401
    assert client.get("/api/dashboard").status_code == 401
    assert client.post("/api/contributions", json={}).status_code == 401


def test_student_crud_and_validation(client, login):
    login()

    created = _create_student(client)
    assert created.status_code == 201
    student = created.get_json()
    assert student["contributionAmount"] == 0

    dup = _create_student(client, firstName="Other")
    assert dup.status_code == 400
    assert dup.get_json()["errors"]

    res = client.put(f"/api/students/{student['id']}", json={"city": "Pune"})
    assert res.status_code == 200
    assert res.get_json()["city"] == "Pune"

    assert client.get("/api/students?search=pune").get_json()[0]["id"] == student["id"]
    assert client.get("/api/students/999").status_code == 404

    assert client.delete(f"/api/students/{student['id']}").status_code == 204
    assert client.get(f"/api/students/{student['id']}").status_code == 404


def test_contribution_flow_updates_student_and_reports(client, login):
    login()
    student = _create_student(client).get_json()

    res = client.post("/api/contributions", json={"studentId": student["id"], "amount": 500, "date": "2025-01-10"})
    assert res.status_code == 201
    contribution = res.get_json()
    assert contribution["recordedBy"] == client.get("/api/user").get_json()["id"]

    after = client.get(f"/api/students/{student['id']}").get_json()
    assert after["contributionAmount"] == 500
    assert after["paidStatus"] == "paid"

    assert client.post("/api/contributions", json={"studentId": student["id"], "amount": 0}).status_code == 400
    assert client.post("/api/contributions", json={"studentId": 999, "amount": 10}).status_code == 404

    res = client.put(f"/api/contributions/{contribution['id']}", json={"amount": 300})
    assert res.status_code == 200
    assert client.get(f"/api/students/{student['id']}").get_json()["contributionAmount"] == 300

    rows = client.get("/api/contributions/with-students?search=asha").get_json()
    assert rows[0]["student"]["id"] == student["id"]

    client.post("/api/budget", json={"name": "Hall", "category": "venue", "estimatedAmount": 600})
    client.post("/api/expenses", json={"title": "Deposit", "category": "venue", "amount": 150, "date": "2025-01-12"})

    dashboard = client.get("/api/dashboard").get_json()
    assert dashboard["totalContributions"] == 300
    assert dashboard["totalExpenses"] == 150
    assert dashboard["budgetUtilization"] == 25
    assert dashboard["paidCount"] == 1

    summary = client.get("/api/budget-summary").get_json()
    assert summary["balance"] == 150
    assert summary["categoryBreakdown"][0] == {"category": "venue", "estimatedAmount": 600, "actualAmount": 150}

    assert client.delete(f"/api/contributions/{contribution['id']}").status_code == 204
    assert client.delete(f"/api/contributions/{contribution['id']}").status_code == 404

    res = client.post("/api/contributions/recalculate")
    assert res.status_code == 200
    assert res.get_json()["changed"] == 0


def test_section_admin_is_scoped(client, login):
    login()
    _create_student(client, section="A", mobile="1000000001")
    _create_student(client, section="B", mobile="1000000002", firstName="Bela")
    res = client.post(
        "/api/register",
        json={"username": "sec-b", "password": "secret1", "role": "section_admin", "section": "B"},
    )
    assert res.status_code == 201
    client.post("/api/logout")

    login("sec-b", "secret1")
    listed = client.get("/api/students?section=A").get_json()
    assert [s["section"] for s in listed] == ["B"]

    assert _create_student(client, section="A", mobile="1000000003").status_code == 403
    assert client.delete(f"/api/students/{listed[0]['id']}").status_code == 403
    assert client.get("/api/users").status_code == 403


def test_anonymous_cannot_register_admin(client):
    res = client.post("/api/register", json={"username": "x", "password": "secret1", "role": "superadmin"})
    assert res.status_code == 403


def test_import_endpoint(client, login):
    login()
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(
            [
                {"first_name": "Asha", "last_name": "Rao", "mobile": "9811111111"},
                {"first_name": "Ravi", "last_name": "Kumar", "mobile": "9822222222", "section": "B"},
            ]
        ).to_excel(writer, index=False)
    buf.seek(0)

    res = client.post(
        "/api/students/import",
        data={"file": (buf, "students.xlsx")},
        content_type="multipart/form-data",
    )

    assert res.status_code == 201
    assert res.get_json()["message"] == "Successfully imported 2 students"
    assert len(client.get("/api/students").get_json()) == 2

    assert client.post("/api/students/import", data={}, content_type="multipart/form-data").status_code == 400


def test_import_endpoint_rejects_legacy_xls(client, login):
    login()
    # OLE2 compound document signature, as written by old Excel versions
    legacy = io.BytesIO(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504)

    res = client.post(
        "/api/students/import",
        data={"file": (legacy, "students.xls")},
        content_type="multipart/form-data",
    )

    assert res.status_code == 400
    assert res.get_json()["message"] == "Only Excel (.xlsx) or CSV files are supported"


def test_categories_enforce_unique_name(client, login):
    login()
    assert client.post("/api/categories", json={"name": "venue", "type": "both"}).status_code == 201
    assert client.post("/api/categories", json={"name": "venue", "type": "expense"}).status_code == 400
    assert client.post("/api/categories", json={"name": "food", "type": "nope"}).status_code == 400
    assert [c["name"] for c in client.get("/api/categories").get_json()] == ["venue"]


def test_unexpected_errors_become_500(app, client, login, monkeypatch):
    login()
    container = app.extensions["reunion_manager"]

    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(container.student_service, "list_students", boom)

    res = client.get("/api/students")
    assert res.status_code == 500
    assert res.get_json() == {"message": "Failed to fetch students"}
