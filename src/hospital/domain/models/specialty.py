from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.hospital.domain.models.common import PartialUpdate


class Specialty(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    descripcion: Optional[str] = None


class SpecialtyCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    descripcion: Optional[str] = None


class SpecialtyUpdate(PartialUpdate):
    non_nullable = ("nombre",)

    nombre: Optional[str] = Field(None, min_length=1, max_length=150)
    descripcion: Optional[str] = None
