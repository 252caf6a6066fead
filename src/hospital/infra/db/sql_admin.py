from __future__ import annotations

from typing import Optional

from sqlalchemy import func

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.doctor import Doctor
from src.hospital.domain.models.employee import Employee
from src.hospital.domain.models.specialty import Specialty
from src.hospital.domain.models.user import User, UserRole
from src.hospital.infra.db.models import CenterORM, DoctorORM, EmployeeORM, SpecialtyORM, UserORM
from src.hospital.infra.db.repositories import (
    CenterRepository,
    DoctorRepository,
    EmployeeRepository,
    SpecialtyRepository,
    UserRepository,
)
from src.hospital.infra.db.sql_base import SqlRepository


class SqlCenterRepository(SqlRepository[Center], CenterRepository):
    orm_class = CenterORM
    model = Center


class SqlSpecialtyRepository(SqlRepository[Specialty], SpecialtyRepository):
    orm_class = SpecialtyORM
    model = Specialty


class SqlEmployeeRepository(SqlRepository[Employee], EmployeeRepository):
    orm_class = EmployeeORM
    model = Employee

    async def get_by_cedula(self, cedula: str) -> Optional[Employee]:
        return await self._find_one(EmployeeORM.cedula == cedula)


class SqlDoctorRepository(SqlRepository[Doctor], DoctorRepository):
    orm_class = DoctorORM
    model = Doctor

    async def get_by_cedula(self, cedula: str) -> Optional[Doctor]:
        return await self._find_one(DoctorORM.cedula == cedula)

    async def get_by_usuario_id(self, usuario_id: int) -> Optional[Doctor]:
        return await self._find_one(DoctorORM.usuario_id == usuario_id)


class SqlUserRepository(SqlRepository[User], UserRepository):
    """Credential Store backed by the ``usuarios`` table."""

    orm_class = UserORM
    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._find_one(UserORM.username == username)

    async def get_by_correo(self, correo: str) -> Optional[User]:
        return await self._find_one(func.lower(UserORM.correo) == correo.lower())

    async def exists_with_role(self, role: UserRole) -> bool:
        return await self._find_one(UserORM.role == role.value) is not None
