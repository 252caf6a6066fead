from fastapi import status

from src.hospital.domain.models.user import UserRole


async def _book(client, headers, doctor_id, centro_id, fecha):
    response = await client.post(
        "/consultas",
        json={"paciente": "Paciente", "doctor_id": doctor_id, "centro_id": centro_id, "fecha": fecha},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def _seed(client, headers):
    await _book(client, headers, 1, 1, "2024-05-01T09:00:00Z")
    await _book(client, headers, 1, 1, "2024-05-10T23:30:00Z")
    await _book(client, headers, 1, 2, "2024-05-15T12:00:00Z")
    await _book(client, headers, 2, 1, "2024-05-10T10:00:00Z")


async def test_report_for_doctor_within_window(consultas_client, auth_headers):
    admin = auth_headers()
    await _seed(consultas_client, admin)

    response = await consultas_client.get(
        "/reportes/doctor/1",
        params={"from": "2024-05-01", "to": "2024-05-10"},
        headers=admin,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["doctor_id"] == 1
    # A date-only upper bound covers the whole day.
    assert body["total"] == 2
    assert all(row["doctor_id"] == 1 for row in body["consultas"])


async def test_report_bounds_are_inclusive(consultas_client, auth_headers):
    admin = auth_headers()
    await _seed(consultas_client, admin)

    response = await consultas_client.get(
        "/reportes/doctor/1",
        params={"from": "2024-05-10T23:30:00Z", "to": "2024-05-15T12:00:00Z"},
        headers=admin,
    )
    assert response.json()["total"] == 2


async def test_admin_report_without_window_or_filtered_by_center(consultas_client, auth_headers):
    admin = auth_headers()
    await _seed(consultas_client, admin)

    everything = await consultas_client.get("/reportes/doctor/1", headers=admin)
    assert everything.json()["total"] == 3

    center_two = await consultas_client.get("/reportes/doctor/1", params={"centro_id": 2}, headers=admin)
    assert center_two.json()["total"] == 1


async def test_doctor_report_is_forced_to_own_id_and_center(consultas_client, auth_headers):
    await _seed(consultas_client, auth_headers())
    doctor = auth_headers(UserRole.DOCTOR, user_id=5, centro_id=1, doctor_id=1)

    response = await consultas_client.get("/reportes/doctor/2", headers=doctor)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["doctor_id"] == 1
    assert body["total"] == 2
    assert all(row["centro_id"] == 1 for row in body["consultas"])


async def test_malformed_dates_are_rejected(consultas_client, auth_headers):
    response = await consultas_client.get(
        "/reportes/doctor/1",
        params={"from": "yesterday", "to": "2024-13-45"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert {e["field"] for e in response.json()["errors"]} == {"from", "to"}


async def test_non_positive_or_non_numeric_doctor_id_is_rejected(consultas_client, auth_headers):
    admin = auth_headers()
    assert (await consultas_client.get("/reportes/doctor/0", headers=admin)).status_code == 400
    assert (await consultas_client.get("/reportes/doctor/abc", headers=admin)).status_code == 400
