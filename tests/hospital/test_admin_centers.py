from fastapi import status

from src.hospital.domain.models.user import UserRole


async def test_create_then_get_returns_same_center(admin_client, auth_headers):
    headers = auth_headers()
    payload = {"nombre": "Hospital Central", "direccion": "Calle 123", "ciudad": "Bogotá", "telefono": "601"}

    created = await admin_client.post("/centros", json=payload, headers=headers)
    assert created.status_code == status.HTTP_201_CREATED
    body = created.json()
    assert body["id"] > 0
    assert body["created_at"]

    fetched = await admin_client.get(f"/centros/{body['id']}", headers=headers)
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.json() == body


async def test_list_centers(admin_client, auth_headers):
    headers = auth_headers()
    await admin_client.post("/centros", json={"nombre": "A"}, headers=headers)
    await admin_client.post("/centros", json={"nombre": "B"}, headers=headers)

    response = await admin_client.get("/centros", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert [c["nombre"] for c in response.json()] == ["A", "B"]


async def test_partial_update_changes_only_supplied_fields(admin_client, auth_headers):
    headers = auth_headers()
    created = (
        await admin_client.post("/centros", json={"nombre": "Clínica Norte", "ciudad": "Medellín"}, headers=headers)
    ).json()

    updated = await admin_client.put(f"/centros/{created['id']}", json={"telefono": "604-987"}, headers=headers)
    assert updated.status_code == status.HTTP_200_OK
    body = updated.json()
    assert body["telefono"] == "604-987"
    assert body["nombre"] == "Clínica Norte"
    assert body["ciudad"] == "Medellín"


async def test_update_rejects_null_on_required_field(admin_client, auth_headers):
    headers = auth_headers()
    created = (await admin_client.post("/centros", json={"nombre": "X"}, headers=headers)).json()

    response = await admin_client.put(f"/centros/{created['id']}", json={"nombre": None}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_delete_then_delete_again_is_404(admin_client, auth_headers):
    headers = auth_headers()
    created = (await admin_client.post("/centros", json={"nombre": "X"}, headers=headers)).json()

    first = await admin_client.delete(f"/centros/{created['id']}", headers=headers)
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"message": "Center deleted", "id": created["id"]}

    second = await admin_client.delete(f"/centros/{created['id']}", headers=headers)
    assert second.status_code == status.HTTP_404_NOT_FOUND

    missing = await admin_client.get(f"/centros/{created['id']}", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_missing_fields_are_all_reported(admin_client, auth_headers):
    response = await admin_client.post(
        "/empleados",
        json={"cargo": "Enfermera"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"nombre", "cedula", "centro_id"} <= fields


async def test_requires_token(admin_client):
    response = await admin_client.get("/centros")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Access token required"}


async def test_rejects_invalid_token(admin_client):
    response = await admin_client.get("/centros", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Invalid token"}


async def test_non_admin_roles_are_forbidden(admin_client, auth_headers):
    doctor = auth_headers(UserRole.DOCTOR, user_id=2, centro_id=1, doctor_id=1)
    employee = auth_headers(UserRole.EMPLOYEE, user_id=3, centro_id=1)

    for headers in (doctor, employee):
        for method, url in (("GET", "/centros"), ("GET", "/medicos"), ("GET", "/usuarios"), ("DELETE", "/centros/1")):
            response = await admin_client.request(method, url, headers=headers)
            assert response.status_code == status.HTTP_403_FORBIDDEN, (method, url)


async def test_specialty_crud(admin_client, auth_headers):
    headers = auth_headers()
    created = await admin_client.post(
        "/especialidades",
        json={"nombre": "Cardiología", "descripcion": "Corazón"},
        headers=headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    specialty_id = created.json()["id"]

    updated = await admin_client.put(f"/especialidades/{specialty_id}", json={"descripcion": None}, headers=headers)
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json() == {"id": specialty_id, "nombre": "Cardiología", "descripcion": None}

    deleted = await admin_client.delete(f"/especialidades/{specialty_id}", headers=headers)
    assert deleted.status_code == status.HTTP_200_OK


async def test_deleting_missing_specialty_is_404(admin_client, auth_headers):
    response = await admin_client.delete("/especialidades/404", headers=auth_headers())
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Specialty not found"}
