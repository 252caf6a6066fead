from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.hospital.domain.models.common import PartialUpdate


class Center(BaseModel):
    """A physical facility (hospital or clinic).

    Doctors, employees, users and consultations all point at a centre by id.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    direccion: Optional[str] = None
    ciudad: Optional[str] = None
    telefono: Optional[str] = None
    created_at: datetime


class CenterCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    direccion: Optional[str] = Field(None, max_length=250)
    ciudad: Optional[str] = Field(None, max_length=100)
    telefono: Optional[str] = Field(None, max_length=50)


class CenterUpdate(PartialUpdate):
    non_nullable = ("nombre",)

    nombre: Optional[str] = Field(None, min_length=1, max_length=150)
    direccion: Optional[str] = Field(None, max_length=250)
    ciudad: Optional[str] = Field(None, max_length=100)
    telefono: Optional[str] = Field(None, max_length=50)
