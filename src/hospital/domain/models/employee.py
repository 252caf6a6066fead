from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.common import PartialUpdate


class Employee(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    # National id number; unique among employees.
    cedula: str
    cargo: str
    centro_id: int


class EmployeeDetail(Employee):
    centro: Optional[Center] = None


class EmployeeCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    cedula: str = Field(min_length=1, max_length=20)
    cargo: str = Field(min_length=1, max_length=100)
    centro_id: int = Field(gt=0)


class EmployeeUpdate(PartialUpdate):
    non_nullable = ("nombre", "cedula", "cargo", "centro_id")

    nombre: Optional[str] = Field(None, min_length=1, max_length=150)
    cedula: Optional[str] = Field(None, min_length=1, max_length=20)
    cargo: Optional[str] = Field(None, min_length=1, max_length=100)
    centro_id: Optional[int] = Field(None, gt=0)
