from __future__ import annotations

import itertools
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.common import utcnow
from src.hospital.domain.models.consultation import Consultation
from src.hospital.domain.models.doctor import Doctor
from src.hospital.domain.models.employee import Employee
from src.hospital.domain.models.specialty import Specialty
from src.hospital.domain.models.user import User, UserRole
from src.hospital.infra.db.repositories import (
    CenterRepository,
    ConsultationRepository,
    CrudRepository,
    DoctorRepository,
    EmployeeRepository,
    ModelT,
    SpecialtyRepository,
    UserRepository,
)


class InMemoryRepository(CrudRepository[ModelT], Generic[ModelT]):
    """Dict-backed repository used in tests and local development.

    None of the methods suspend, so each call is atomic with respect to other
    requests on the event loop.
    """

    model: Type[ModelT]

    def __init__(self) -> None:
        self._rows: Dict[int, ModelT] = {}
        self._ids = itertools.count(1)

    async def add(self, data: Dict[str, Any]) -> ModelT:
        values = dict(data)
        if "created_at" in self.model.model_fields and values.get("created_at") is None:
            values["created_at"] = utcnow()
        entity = self.model(id=next(self._ids), **values)
        self._rows[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    async def list_all(self) -> List[ModelT]:
        return list(self._rows.values())

    async def get(self, entity_id: int) -> Optional[ModelT]:
        return self._rows.get(entity_id)

    async def update(self, entity_id: int, changes: Dict[str, Any]) -> Optional[ModelT]:
        current = self._rows.get(entity_id)
        if current is None:
            return None
        updated = current.model_copy(update=changes)
        self._rows[entity_id] = updated
        return updated

    async def delete(self, entity_id: int) -> bool:
        return self._rows.pop(entity_id, None) is not None

    def _find_one(self, **criteria: Any) -> Optional[ModelT]:
        for row in self._rows.values():
            if all(getattr(row, key) == value for key, value in criteria.items()):
                return row
        return None


class InMemoryCenterRepository(InMemoryRepository[Center], CenterRepository):
    model = Center


class InMemorySpecialtyRepository(InMemoryRepository[Specialty], SpecialtyRepository):
    model = Specialty


class InMemoryEmployeeRepository(InMemoryRepository[Employee], EmployeeRepository):
    model = Employee

    async def get_by_cedula(self, cedula: str) -> Optional[Employee]:
        return self._find_one(cedula=cedula)


class InMemoryDoctorRepository(InMemoryRepository[Doctor], DoctorRepository):
    model = Doctor

    async def get_by_cedula(self, cedula: str) -> Optional[Doctor]:
        return self._find_one(cedula=cedula)

    async def get_by_usuario_id(self, usuario_id: int) -> Optional[Doctor]:
        return self._find_one(usuario_id=usuario_id)


class InMemoryUserRepository(InMemoryRepository[User], UserRepository):
    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        return self._find_one(username=username)

    async def get_by_correo(self, correo: str) -> Optional[User]:
        wanted = correo.lower()
        for user in self._rows.values():
            if user.correo.lower() == wanted:
                return user
        return None

    async def exists_with_role(self, role: UserRole) -> bool:
        return self._find_one(role=role) is not None


class InMemoryConsultationRepository(InMemoryRepository[Consultation], ConsultationRepository):
    model = Consultation

    async def list_by_filters(
        self,
        *,
        doctor_id: Optional[int] = None,
        centro_id: Optional[int] = None,
        fecha_desde: Optional[datetime] = None,
        fecha_hasta: Optional[datetime] = None,
    ) -> List[Consultation]:
        results: List[Consultation] = []
        for consultation in self._rows.values():
            if doctor_id is not None and consultation.doctor_id != doctor_id:
                continue
            if centro_id is not None and consultation.centro_id != centro_id:
                continue
            if fecha_desde is not None and consultation.fecha < fecha_desde:
                continue
            if fecha_hasta is not None and consultation.fecha > fecha_hasta:
                continue
            results.append(consultation)
        return results
