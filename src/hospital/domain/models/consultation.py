from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.hospital.domain.models.common import PartialUpdate, ensure_utc


class ConsultationStatus(str, Enum):
    SCHEDULED = "programada"
    IN_PROGRESS = "en_curso"
    COMPLETED = "completada"
    CANCELLED = "cancelada"


class Consultation(BaseModel):
    """A scheduled patient consultation.

    ``doctor_id`` and ``centro_id`` refer to records owned by the admin
    service. They are stored as opaque ids; nothing here checks they exist.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    paciente: str
    doctor_id: int
    centro_id: int
    fecha: datetime
    notas: Optional[str] = None
    estado: ConsultationStatus = ConsultationStatus.SCHEDULED
    created_at: datetime

    @field_validator("fecha", "created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class ConsultationCreate(BaseModel):
    paciente: str = Field(min_length=1)
    # Required for admins, overridden for doctors.
    doctor_id: Optional[int] = Field(None, gt=0)
    centro_id: Optional[int] = Field(None, gt=0)
    fecha: datetime
    notas: Optional[str] = None
    estado: ConsultationStatus = ConsultationStatus.SCHEDULED

    @field_validator("fecha")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]


class ConsultationUpdate(PartialUpdate):
    non_nullable = ("paciente", "doctor_id", "centro_id", "fecha", "estado")

    paciente: Optional[str] = Field(None, min_length=1)
    doctor_id: Optional[int] = Field(None, gt=0)
    centro_id: Optional[int] = Field(None, gt=0)
    fecha: Optional[datetime] = None
    notas: Optional[str] = None
    estado: Optional[ConsultationStatus] = None

    @field_validator("fecha")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class DoctorReport(BaseModel):
    doctor_id: int
    total: int
    consultas: List[Consultation]
