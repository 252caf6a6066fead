from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.hospital.domain.models.center import Center
from src.hospital.domain.models.common import PartialUpdate


class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "medico"
    EMPLOYEE = "empleado"


# Roles that must belong to a centre.
CENTER_BOUND_ROLES = frozenset({UserRole.DOCTOR, UserRole.EMPLOYEE})


class User(BaseModel):
    """Credential Store record. Never serialised to clients as-is."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    correo: EmailStr
    password_hash: str
    role: UserRole
    centro_id: Optional[int] = None
    created_at: datetime


class UserPublic(BaseModel):
    """What the API returns for a user: no password material."""

    id: int
    username: str
    correo: EmailStr
    role: UserRole
    centro_id: Optional[int] = None
    created_at: datetime
    centro: Optional[Center] = None


class UserIdentity(BaseModel):
    """Identity handed to the gateway after credentials were verified.

    This is the input to token issuance; ``doctor_id`` is only set for
    ``medico`` users linked to a doctor record.
    """

    id: int
    username: str
    role: UserRole
    centro_id: Optional[int] = None
    doctor_id: Optional[int] = None


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=72)
    correo: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    centro_id: Optional[int] = Field(None, gt=0)


class UserUpdate(PartialUpdate):
    non_nullable = ("username", "password", "correo", "role")

    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1, max_length=72)
    correo: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    centro_id: Optional[int] = Field(None, gt=0)


class InitialAdminRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=72)
    correo: EmailStr
    centro_id: Optional[int] = Field(None, gt=0)


class CredentialsRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class EmailLookupRequest(BaseModel):
    correo: EmailStr
