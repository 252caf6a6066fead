from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional

from pydantic import BaseModel

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.common import PartialUpdate
from src.hospital.domain.models.doctor import Doctor, DoctorDetail
from src.hospital.domain.models.employee import Employee, EmployeeDetail
from src.hospital.domain.models.specialty import Specialty
from src.hospital.domain.models.user import UserRole
from src.hospital.errors import ConflictError, FieldError, NotFoundError, ValidationError
from src.hospital.infra.db.repositories import (
    CenterRepository,
    CrudRepository,
    DoctorRepository,
    EmployeeRepository,
    ModelT,
    SpecialtyRepository,
    UserRepository,
)
from src.hospital.services.audit.service import audit_service


async def check_reference(
    errors: List[FieldError],
    repository: CrudRepository[Any],
    field: str,
    value: Optional[int],
) -> None:
    """Record a field error if ``value`` is set but names no existing row."""

    if value is not None and await repository.get(value) is None:
        errors.append(FieldError(field=field, message=f"No record with id {value}"))


class EntityService(Generic[ModelT]):
    """Uniform create/list/get/update/delete over one admin entity.

    Subclasses hook in reference and uniqueness checks through
    :meth:`_validate`, which sees the merged state of the row (current values
    overlaid with the incoming changes).
    """

    resource_type: str = "entity"
    label: str = "Record"

    def __init__(self, repository: CrudRepository[ModelT]) -> None:
        self._repository = repository

    async def _validate(self, merged: Dict[str, Any], current: Optional[ModelT]) -> None:
        return None

    async def create(self, payload: BaseModel) -> ModelT:
        data = payload.model_dump()
        await self._validate(data, None)
        entity = await self._repository.add(data)
        audit_service.log_event(
            action="create",
            resource_type=self.resource_type,
            resource_id=str(entity.id),  # type: ignore[attr-defined]
        )
        return entity

    async def list_all(self) -> List[ModelT]:
        return await self._repository.list_all()

    async def get(self, entity_id: int) -> ModelT:
        entity = await self._repository.get(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        return entity

    async def update(self, entity_id: int, payload: PartialUpdate) -> ModelT:
        current = await self.get(entity_id)
        changes = payload.changes()
        merged = {**current.model_dump(), **changes}
        await self._validate(merged, current)

        updated = await self._repository.update(entity_id, changes)
        if updated is None:
            raise NotFoundError(f"{self.label} not found")
        audit_service.log_event(
            action="update",
            resource_type=self.resource_type,
            resource_id=str(entity_id),
            extra={"fields": sorted(changes)},
        )
        return updated

    async def delete(self, entity_id: int) -> None:
        deleted = await self._repository.delete(entity_id)
        if not deleted:
            raise NotFoundError(f"{self.label} not found")
        audit_service.log_event(action="delete", resource_type=self.resource_type, resource_id=str(entity_id))


class CenterService(EntityService[Center]):
    resource_type = "centro"
    label = "Center"


class SpecialtyService(EntityService[Specialty]):
    resource_type = "especialidad"
    label = "Specialty"


class EmployeeService(EntityService[Employee]):
    resource_type = "empleado"
    label = "Employee"

    def __init__(self, repository: EmployeeRepository, centers: CenterRepository) -> None:
        super().__init__(repository)
        self._employees = repository
        self._centers = centers

    async def _validate(self, merged: Dict[str, Any], current: Optional[Employee]) -> None:
        errors: List[FieldError] = []
        if current is None or merged["centro_id"] != current.centro_id:
            await check_reference(errors, self._centers, "centro_id", merged["centro_id"])
        if errors:
            raise ValidationError(errors)

        if current is None or merged["cedula"] != current.cedula:
            if await self._employees.get_by_cedula(merged["cedula"]) is not None:
                raise ConflictError("An employee with this cedula already exists")

    async def detail(self, employee: Employee) -> EmployeeDetail:
        centro = await self._centers.get(employee.centro_id)
        return EmployeeDetail(**employee.model_dump(), centro=centro)

    async def list_detailed(self) -> List[EmployeeDetail]:
        return [await self.detail(employee) for employee in await self.list_all()]


class DoctorService(EntityService[Doctor]):
    resource_type = "medico"
    label = "Doctor"

    def __init__(
        self,
        repository: DoctorRepository,
        *,
        centers: CenterRepository,
        specialties: SpecialtyRepository,
        users: UserRepository,
    ) -> None:
        super().__init__(repository)
        self._doctors = repository
        self._centers = centers
        self._specialties = specialties
        self._users = users

    async def _validate(self, merged: Dict[str, Any], current: Optional[Doctor]) -> None:
        errors: List[FieldError] = []
        if current is None or merged["centro_id"] != current.centro_id:
            await check_reference(errors, self._centers, "centro_id", merged["centro_id"])
        if current is None or merged["especialidad_id"] != current.especialidad_id:
            await check_reference(errors, self._specialties, "especialidad_id", merged["especialidad_id"])

        usuario_id = merged.get("usuario_id")
        usuario_changed = current is None or usuario_id != current.usuario_id
        if usuario_id is not None and usuario_changed:
            user = await self._users.get(usuario_id)
            if user is None:
                errors.append(FieldError(field="usuario_id", message=f"No record with id {usuario_id}"))
            elif user.role != UserRole.DOCTOR:
                errors.append(FieldError(field="usuario_id", message="Linked user must have role medico"))
        if errors:
            raise ValidationError(errors)

        if current is None or merged["cedula"] != current.cedula:
            if await self._doctors.get_by_cedula(merged["cedula"]) is not None:
                raise ConflictError("A doctor with this cedula already exists")
        if usuario_id is not None and usuario_changed:
            if await self._doctors.get_by_usuario_id(usuario_id) is not None:
                raise ConflictError("This user is already linked to another doctor")

    async def detail(self, doctor: Doctor) -> DoctorDetail:
        especialidad = await self._specialties.get(doctor.especialidad_id)
        centro = await self._centers.get(doctor.centro_id)
        return DoctorDetail(**doctor.model_dump(), especialidad=especialidad, centro=centro)

    async def list_detailed(self) -> List[DoctorDetail]:
        return [await self.detail(doctor) for doctor in await self.list_all()]
