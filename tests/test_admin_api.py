import uuid
from typing import Dict

import pytest
from httpx import AsyncClient


def _student_payload(**overrides) -> Dict:
    payload = {
        "email": "Meera.Iyer@Cambridge.edu.in",
        "password": "student123",
        "name": "Meera Iyer",
        "registration_number": "1cr23cs077",
        "department": "Computer Science",
        "year": 1,
        "semester": 2,
        "total_fees": 120000,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_add_student_normalizes_identifiers(client: AsyncClient, admin_headers) -> None:
    response = await client.post("/api/v1/admin/add-student", json=_student_payload(), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()

    assert data["success"] is True
    assert data["message"] == "Student account created successfully"
    student = data["student"]
    assert student["email"] == "meera.iyer@cambridge.edu.in"
    assert student["registration_number"] == "1CR23CS077"
    assert student["total_fees"] == 120000
    assert "password" not in student and "password_hash" not in student
    uuid.UUID(student["id"])


@pytest.mark.asyncio
async def test_add_student_rejects_foreign_domain(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        "/api/v1/admin/add-student",
        json=_student_payload(email="meera@gmail.com"),
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Student email must end with @cambridge.edu.in",
    }

    roster = await client.get("/api/v1/admin/students", headers=admin_headers)
    assert roster.json()["count"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["email", "password", "name", "registration_number", "department", "year", "semester", "total_fees"])
async def test_add_student_requires_every_field(client: AsyncClient, admin_headers, missing: str) -> None:
    payload = _student_payload()
    payload.pop(missing)
    response = await client.post("/api/v1/admin/add-student", json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide all required fields"


@pytest.mark.asyncio
async def test_add_student_rejects_out_of_range_year(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        "/api/v1/admin/add-student", json=_student_payload(year=5), headers=admin_headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "year" in body["message"]


@pytest.mark.asyncio
async def test_add_student_duplicates(client: AsyncClient, admin_headers) -> None:
    first = await client.post("/api/v1/admin/add-student", json=_student_payload(), headers=admin_headers)
    assert first.status_code == 201

    same_email = await client.post(
        "/api/v1/admin/add-student",
        json=_student_payload(email="meera.iyer@cambridge.edu.in", registration_number="1CR23CS999"),
        headers=admin_headers,
    )
    assert same_email.status_code == 400
    assert same_email.json()["message"] == "User with this email already exists"

    same_reg = await client.post(
        "/api/v1/admin/add-student",
        json=_student_payload(email="other@cambridge.edu.in", registration_number=" 1CR23cs077 "),
        headers=admin_headers,
    )
    assert same_reg.status_code == 400
    assert same_reg.json()["message"] == "Student with this registration number already exists"


@pytest.mark.asyncio
async def test_roster_and_single_view_agree(client: AsyncClient, admin_headers, make_student, headers_for) -> None:
    student = await make_student(total_fees="1000")
    student_id = str(student.id)
    headers = headers_for(student)
    await make_student(total_fees="500")

    pay = await client.post("/api/v1/student/pay", json={"amount": 250}, headers=headers)
    assert pay.status_code == 201

    roster = await client.get("/api/v1/admin/students", headers=admin_headers)
    assert roster.status_code == 200
    assert roster.json()["count"] == 2
    from_roster = next(s for s in roster.json()["students"] if s["id"] == student_id)

    single = await client.get(f"/api/v1/admin/students/{student_id}", headers=admin_headers)
    assert single.status_code == 200
    from_single = single.json()["student"]

    own = await client.get("/api/v1/student/fees", headers=headers)
    from_self = own.json()["fees_details"]

    for view in (from_roster, from_single, from_self):
        assert view["total_fees"] == 1000
        assert view["amount_paid"] == 250
        assert view["amount_due"] == 750
        assert len(view["payment_history"]) == 1


@pytest.mark.asyncio
async def test_single_view_of_admin_or_unknown_is_404(client: AsyncClient, admin, admin_headers) -> None:
    admin_id = str(admin.id)
    response = await client.get(f"/api/v1/admin/students/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found"}

    response = await client.get(f"/api/v1/admin/students/{admin_id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_lowering_fees_below_paid_gives_negative_due(
    client: AsyncClient, admin_headers, make_student, headers_for
) -> None:
    student = await make_student(total_fees="1000")
    student_id = str(student.id)
    headers = headers_for(student)
    assert (await client.post("/api/v1/student/pay", json={"amount": 600}, headers=headers)).status_code == 201

    response = await client.patch(
        f"/api/v1/admin/update-fees/{student_id}", json={"total_fees": 300}, headers=admin_headers
    )
    assert response.status_code == 200
    updated = response.json()["student"]
    assert updated["total_fees"] == 300
    assert updated["amount_paid"] == 600
    assert updated["amount_due"] == -300

    stats = (await client.get("/api/v1/admin/dashboard-stats", headers=admin_headers)).json()["stats"]
    assert stats["total_fees_expected"] == 300
    assert stats["total_fees_collected"] == 600
    assert stats["total_fees_pending"] == -300

    # Nothing more can be paid while the due is negative
    rejected = await client.post("/api/v1/student/pay", json={"amount": 1}, headers=headers)
    assert rejected.status_code == 400
    assert "-300" in rejected.json()["message"]


@pytest.mark.asyncio
async def test_update_profile_fields(client: AsyncClient, admin_headers, make_student) -> None:
    student_id = str((await make_student(total_fees="1000")).id)
    response = await client.patch(
        f"/api/v1/admin/update-fees/{student_id}",
        json={"name": "Asha R. Rao", "year": 3, "semester": 6},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Student information updated successfully"
    assert body["student"]["name"] == "Asha R. Rao"
    assert body["student"]["year"] == 3
    assert body["student"]["semester"] == 6
    assert body["student"]["total_fees"] == 1000

    bad = await client.patch(
        f"/api/v1/admin/update-fees/{student_id}", json={"total_fees": -1}, headers=admin_headers
    )
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_delete_student_removes_payments(client: AsyncClient, admin_headers, make_student, headers_for) -> None:
    student = await make_student(total_fees="1000")
    student_id = str(student.id)
    headers = headers_for(student)
    other = await make_student(total_fees="400")
    other_headers = headers_for(other)
    await client.post("/api/v1/student/pay", json={"amount": 100}, headers=headers)
    await client.post("/api/v1/student/pay", json={"amount": 150}, headers=other_headers)

    response = await client.delete(f"/api/v1/admin/students/{student_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Student account deleted successfully"}

    assert (await client.get(f"/api/v1/admin/students/{student_id}", headers=admin_headers)).status_code == 404
    assert (await client.delete(f"/api/v1/admin/students/{student_id}", headers=admin_headers)).status_code == 404

    stats = (await client.get("/api/v1/admin/dashboard-stats", headers=admin_headers)).json()["stats"]
    assert stats["total_students"] == 1
    assert stats["total_payments"] == 1
    assert stats["total_fees_collected"] == 150


@pytest.mark.asyncio
async def test_dashboard_stats(client: AsyncClient, admin_headers, make_student, headers_for) -> None:
    a = await make_student(total_fees="1000")
    b = await make_student(total_fees="2000")
    await make_student(total_fees="500")
    a_headers, b_headers = headers_for(a), headers_for(b)

    await client.post("/api/v1/student/pay", json={"amount": 400}, headers=a_headers)
    await client.post("/api/v1/student/pay", json={"amount": 600}, headers=a_headers)
    await client.post("/api/v1/student/pay", json={"amount": 250.5}, headers=b_headers)

    response = await client.get("/api/v1/admin/dashboard-stats", headers=admin_headers)
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats == {
        "total_students": 3,
        "total_payments": 3,
        "total_fees_expected": 3500,
        "total_fees_collected": 1250.5,
        "total_fees_pending": 2249.5,
    }

    roster = (await client.get("/api/v1/admin/students", headers=admin_headers)).json()["students"]
    assert sum(s["amount_paid"] for s in roster) == stats["total_fees_collected"]


@pytest.mark.asyncio
async def test_admin_routes_reject_students(client: AsyncClient, make_student, headers_for) -> None:
    headers = headers_for(await make_student())
    response = await client.get("/api/v1/admin/dashboard-stats", headers=headers)
    assert response.status_code == 403
    assert response.json()["success"] is False

    response = await client.get("/api/v1/admin/students")
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("total_fees", [1e12, 100.555])
async def test_total_fees_must_fit_storage(client: AsyncClient, admin_headers, make_student, total_fees) -> None:
    response = await client.post(
        "/api/v1/admin/add-student", json=_student_payload(total_fees=total_fees), headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "total_fees" in response.json()["message"]

    student_id = str((await make_student(total_fees="1000")).id)
    response = await client.patch(
        f"/api/v1/admin/update-fees/{student_id}", json={"total_fees": total_fees}, headers=admin_headers
    )
    assert response.status_code == 400

    single = await client.get(f"/api/v1/admin/students/{student_id}", headers=admin_headers)
    assert single.json()["student"]["total_fees"] == 1000
