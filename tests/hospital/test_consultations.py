from fastapi import status

from src.hospital.domain.models.user import UserRole


def _consulta(doctor_id=1, centro_id=1, fecha="2024-05-10T09:00:00Z", **overrides):
    payload = {"paciente": "Juan Perez", "doctor_id": doctor_id, "centro_id": centro_id, "fecha": fecha}
    payload.update(overrides)
    return payload


async def _seed(client, headers):
    rows = [
        _consulta(doctor_id=1, centro_id=1, fecha="2024-05-01T09:00:00Z"),
        _consulta(doctor_id=1, centro_id=1, fecha="2024-05-10T15:30:00Z"),
        _consulta(doctor_id=2, centro_id=1, fecha="2024-05-10T10:00:00Z"),
        _consulta(doctor_id=3, centro_id=2, fecha="2024-05-11T08:00:00Z"),
    ]
    created = []
    for row in rows:
        response = await client.post("/consultas", json=row, headers=headers)
        assert response.status_code == status.HTTP_201_CREATED
        created.append(response.json())
    return created


async def test_admin_create_requires_doctor_and_center(consultas_client, auth_headers):
    response = await consultas_client.post(
        "/consultas",
        json={"paciente": "Juan", "fecha": "2024-05-10T09:00:00Z"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert {e["field"] for e in response.json()["errors"]} == {"doctor_id", "centro_id"}


async def test_default_status_is_programada(consultas_client, auth_headers):
    response = await consultas_client.post("/consultas", json=_consulta(), headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["estado"] == "programada"


async def test_doctor_create_is_forced_to_own_identity(consultas_client, auth_headers):
    doctor = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=2, doctor_id=7)
    response = await consultas_client.post(
        "/consultas",
        json=_consulta(doctor_id=99, centro_id=99),
        headers=doctor,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["doctor_id"] == 7
    assert body["centro_id"] == 2


async def test_doctor_only_sees_own_rows(consultas_client, auth_headers):
    await _seed(consultas_client, auth_headers())
    doctor = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=1, doctor_id=1)

    response = await consultas_client.get("/consultas", headers=doctor)
    assert response.status_code == status.HTTP_200_OK
    rows = response.json()
    assert len(rows) == 2
    assert all(row["doctor_id"] == 1 and row["centro_id"] == 1 for row in rows)

    # The centre filter cannot widen a doctor's scope.
    widened = await consultas_client.get("/consultas", params={"centro_id": 2}, headers=doctor)
    assert len(widened.json()) == 2


async def test_admin_sees_all_and_can_filter_by_center(consultas_client, auth_headers):
    admin = auth_headers()
    await _seed(consultas_client, admin)

    everything = await consultas_client.get("/consultas", headers=admin)
    assert len(everything.json()) == 4

    center_two = await consultas_client.get("/consultas", params={"centro_id": 2}, headers=admin)
    assert [row["doctor_id"] for row in center_two.json()] == [3]


async def test_doctor_cannot_touch_other_doctors_consultation(consultas_client, auth_headers):
    rows = await _seed(consultas_client, auth_headers())
    foreign = next(row for row in rows if row["doctor_id"] == 2)
    doctor = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=1, doctor_id=1)

    assert (await consultas_client.get(f"/consultas/{foreign['id']}", headers=doctor)).status_code == 403
    assert (
        await consultas_client.put(f"/consultas/{foreign['id']}", json={"notas": "x"}, headers=doctor)
    ).status_code == 403
    assert (await consultas_client.delete(f"/consultas/{foreign['id']}", headers=doctor)).status_code == 403


async def test_doctor_updates_own_consultation_but_not_its_owner(consultas_client, auth_headers):
    rows = await _seed(consultas_client, auth_headers())
    own = rows[0]
    doctor = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=1, doctor_id=1)

    response = await consultas_client.put(
        f"/consultas/{own['id']}",
        json={"estado": "completada", "notas": "Control", "doctor_id": 2, "centro_id": 2},
        headers=doctor,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["estado"] == "completada"
    assert body["notas"] == "Control"
    assert body["doctor_id"] == 1
    assert body["centro_id"] == 1

    deleted = await consultas_client.delete(f"/consultas/{own['id']}", headers=doctor)
    assert deleted.status_code == status.HTTP_200_OK
    assert (await consultas_client.get(f"/consultas/{own['id']}", headers=doctor)).status_code == 404


async def test_invalid_status_is_rejected(consultas_client, auth_headers):
    response = await consultas_client.post("/consultas", json=_consulta(estado="pendiente"), headers=auth_headers())
    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_doctor_without_doctor_claim_is_forbidden(consultas_client, auth_headers):
    unlinked = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=1)
    assert (await consultas_client.get("/consultas", headers=unlinked)).status_code == 403
    assert (await consultas_client.post("/consultas", json=_consulta(), headers=unlinked)).status_code == 403


async def test_doctor_without_center_claim_is_forbidden(consultas_client, auth_headers):
    no_center = auth_headers(UserRole.DOCTOR, user_id=5, doctor_id=1)
    assert (await consultas_client.get("/consultas", headers=no_center)).status_code == 403


async def test_employee_role_is_forbidden(consultas_client, auth_headers):
    employee = auth_headers(UserRole.EMPLOYEE, user_id=9, centro_id=1)
    assert (await consultas_client.get("/consultas", headers=employee)).status_code == 403
    assert (await consultas_client.get("/reportes/doctor/1", headers=employee)).status_code == 403


async def test_missing_token_is_401(consultas_client):
    assert (await consultas_client.get("/consultas")).status_code == 401
    assert (await consultas_client.get("/reportes/doctor/1")).status_code == 401


async def test_unknown_consultation_is_404(consultas_client, auth_headers):
    assert (await consultas_client.get("/consultas/12345", headers=auth_headers())).status_code == 404
    assert (await consultas_client.delete("/consultas/12345", headers=auth_headers())).status_code == 404
