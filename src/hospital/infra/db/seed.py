"""Demo data for local runs of the admin service (``SEED_DEMO_DATA=true``).

Goes through the services so passwords are hashed and references checked
exactly as for API callers. Skipped when any user already exists.
"""

from __future__ import annotations

import logging
from typing import Dict

from src.hospital.domain.models.center import CenterCreate
from src.hospital.domain.models.doctor import DoctorCreate
from src.hospital.domain.models.employee import EmployeeCreate
from src.hospital.domain.models.specialty import SpecialtyCreate
from src.hospital.domain.models.user import UserCreate, UserRole
from src.hospital.services.admin.service import CenterService, DoctorService, EmployeeService, SpecialtyService
from src.hospital.services.users.service import UserService

logger = logging.getLogger("hospital.seed")

CENTERS = [
    ("Hospital Central", "Calle 123 #45-67", "Bogotá", "601-234-5678"),
    ("Clínica Norte", "Carrera 45 #123-89", "Medellín", "604-987-6543"),
    ("Centro Médico Sur", "Avenida 68 #23-45", "Cali", "602-876-5432"),
    ("Hospital Universitario", "Calle 67 #89-12", "Barranquilla", "605-345-6789"),
]

SPECIALTIES = [
    ("Cardiología", "Especialidad médica que se ocupa del corazón y sistema circulatorio"),
    ("Neurología", "Especialidad que trata enfermedades del sistema nervioso"),
    ("Pediatría", "Especialidad dedicada al cuidado de niños y adolescentes"),
    ("Ginecología", "Especialidad que trata la salud de la mujer"),
    ("Traumatología", "Especialidad que trata lesiones del aparato locomotor"),
    ("Medicina General", "Atención médica integral y primaria"),
    ("Psiquiatría", "Especialidad que trata trastornos mentales"),
    ("Dermatología", "Especialidad que trata enfermedades de la piel"),
]

# (username, password, role, centre index)
USERS = [
    ("admin", "admin123", UserRole.ADMIN, None),
    ("dr.rodriguez", "password123", UserRole.DOCTOR, 0),
    ("dr.martinez", "password123", UserRole.DOCTOR, 1),
    ("dr.lopez", "password123", UserRole.DOCTOR, 0),
    ("enfermera.garcia", "password123", UserRole.EMPLOYEE, 2),
    ("recepcion.silva", "password123", UserRole.EMPLOYEE, 3),
]

# (nombre, cedula, telefono, specialty index, centre index, linked username)
DOCTORS = [
    ("Dr. Carlos Rodriguez", "12345678", "300-123-4567", 0, 0, "dr.rodriguez"),
    ("Dra. Ana Martinez", "23456789", "301-234-5678", 1, 1, "dr.martinez"),
    ("Dr. Luis Lopez", "34567890", "302-345-6789", 2, 0, "dr.lopez"),
    ("Dra. Maria Gonzalez", "45678901", "303-456-7890", 3, 2, None),
    ("Dr. Pedro Ramirez", "56789012", "304-567-8901", 4, 3, None),
    ("Dra. Sofia Castro", "67890123", "305-678-9012", 5, 1, None),
    ("Dr. Diego Herrera", "78901234", "306-789-0123", 6, 2, None),
    ("Dra. Carmen Vargas", "89012345", "307-890-1234", 7, 0, None),
]

# (nombre, cedula, cargo, centre index)
EMPLOYEES = [
    ("Patricia Garcia", "11111111", "Enfermera Jefe", 0),
    ("Roberto Silva", "22222222", "Recepcionista", 1),
    ("Lucia Morales", "33333333", "Auxiliar de Enfermería", 0),
    ("Fernando Torres", "44444444", "Administrativo", 2),
    ("Isabel Ruiz", "55555555", "Coordinadora", 3),
    ("Andres Mejia", "66666666", "Técnico en Sistemas", 1),
    ("Monica Jimenez", "77777777", "Secretaria Médica", 2),
    ("Rafael Ospina", "88888888", "Auxiliar Administrativo", 3),
]


async def seed_demo_data(
    *,
    centers: CenterService,
    specialties: SpecialtyService,
    employees: EmployeeService,
    doctors: DoctorService,
    users: UserService,
) -> bool:
    """Load the demo records. Returns ``False`` if the store was not empty."""

    if await users.list_all():
        logger.info("Users already present; skipping demo seed")
        return False

    center_ids = [
        (await centers.create(CenterCreate(nombre=n, direccion=d, ciudad=c, telefono=t))).id
        for n, d, c, t in CENTERS
    ]
    specialty_ids = [
        (await specialties.create(SpecialtyCreate(nombre=n, descripcion=d))).id for n, d in SPECIALTIES
    ]

    user_ids: Dict[str, int] = {}
    for username, password, role, center_index in USERS:
        user = await users.create(
            UserCreate(
                username=username,
                password=password,
                correo=f"{username}@hospital.com",
                role=role,
                centro_id=center_ids[center_index] if center_index is not None else None,
            )
        )
        user_ids[username] = user.id

    for nombre, cedula, telefono, specialty_index, center_index, username in DOCTORS:
        await doctors.create(
            DoctorCreate(
                nombre=nombre,
                cedula=cedula,
                telefono=telefono,
                especialidad_id=specialty_ids[specialty_index],
                centro_id=center_ids[center_index],
                usuario_id=user_ids[username] if username else None,
            )
        )

    for nombre, cedula, cargo, center_index in EMPLOYEES:
        await employees.create(
            EmployeeCreate(nombre=nombre, cedula=cedula, cargo=cargo, centro_id=center_ids[center_index])
        )

    logger.info(
        "Seeded %d centres, %d specialties, %d users, %d doctors, %d employees",
        len(CENTERS),
        len(SPECIALTIES),
        len(USERS),
        len(DOCTORS),
        len(EMPLOYEES),
    )
    return True
