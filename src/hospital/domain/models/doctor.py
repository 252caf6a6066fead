from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.common import PartialUpdate
from src.hospital.domain.models.specialty import Specialty


class Doctor(BaseModel):
    """A doctor working at a centre.

    ``usuario_id`` links the record to the ``medico`` user account that logs in
    as this doctor; it is how a session resolves its own doctor id.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    cedula: str
    telefono: str
    especialidad_id: int
    centro_id: int
    usuario_id: Optional[int] = None


class DoctorDetail(Doctor):
    especialidad: Optional[Specialty] = None
    centro: Optional[Center] = None


class DoctorCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    cedula: str = Field(min_length=1, max_length=20)
    telefono: str = Field(min_length=1, max_length=50)
    especialidad_id: int = Field(gt=0)
    centro_id: int = Field(gt=0)
    usuario_id: Optional[int] = Field(None, gt=0)


class DoctorUpdate(PartialUpdate):
    non_nullable = ("nombre", "cedula", "telefono", "especialidad_id", "centro_id")

    nombre: Optional[str] = Field(None, min_length=1, max_length=150)
    cedula: Optional[str] = Field(None, min_length=1, max_length=20)
    telefono: Optional[str] = Field(None, min_length=1, max_length=50)
    especialidad_id: Optional[int] = Field(None, gt=0)
    centro_id: Optional[int] = Field(None, gt=0)
    # Explicit null unlinks the user account.
    usuario_id: Optional[int] = Field(None, gt=0)
