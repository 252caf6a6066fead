from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.consultation import Consultation
from src.hospital.domain.models.doctor import Doctor
from src.hospital.domain.models.employee import Employee
from src.hospital.domain.models.specialty import Specialty
from src.hospital.domain.models.user import User, UserRole

ModelT = TypeVar("ModelT", bound=BaseModel)


class CrudRepository(ABC, Generic[ModelT]):
    """Storage contract shared by every entity.

    Ids are assigned by the repository. ``update`` applies only the keys
    present in ``changes``. Unique-constraint violations raise ConflictError.
    """

    @abstractmethod
    async def add(self, data: Dict[str, Any]) -> ModelT:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[ModelT]:
        raise NotImplementedError

    @abstractmethod
    async def get(self, entity_id: int) -> Optional[ModelT]:
        raise NotImplementedError

    @abstractmethod
    async def update(self, entity_id: int, changes: Dict[str, Any]) -> Optional[ModelT]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        raise NotImplementedError


class CenterRepository(CrudRepository[Center]):
    pass


class SpecialtyRepository(CrudRepository[Specialty]):
    pass


class EmployeeRepository(CrudRepository[Employee]):
    @abstractmethod
    async def get_by_cedula(self, cedula: str) -> Optional[Employee]:
        raise NotImplementedError


class DoctorRepository(CrudRepository[Doctor]):
    @abstractmethod
    async def get_by_cedula(self, cedula: str) -> Optional[Doctor]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_usuario_id(self, usuario_id: int) -> Optional[Doctor]:
        raise NotImplementedError


class UserRepository(CrudRepository[User]):
    """The Credential Store."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_correo(self, correo: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def exists_with_role(self, role: UserRole) -> bool:
        raise NotImplementedError


class ConsultationRepository(CrudRepository[Consultation]):
    @abstractmethod
    async def list_by_filters(
        self,
        *,
        doctor_id: Optional[int] = None,
        centro_id: Optional[int] = None,
        fecha_desde: Optional[datetime] = None,
        fecha_hasta: Optional[datetime] = None,
    ) -> List[Consultation]:
        """Rows matching every supplied filter; date bounds are inclusive."""

        raise NotImplementedError
