"""Accessors for the per-application services stored on ``app.state``.

Each application factory wires its services once; handlers pull them in
with ``Depends`` so tests can build isolated apps side by side.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Query, Request

from src.hospital.config import Settings
from src.hospital.domain.models.claims import SessionClaims
from src.hospital.security import require_doctor_or_admin
from src.hospital.services.admin.service import CenterService, DoctorService, EmployeeService, SpecialtyService
from src.hospital.services.auth.service import AuthService
from src.hospital.services.consultations.scope import ConsultationScope
from src.hospital.services.consultations.service import ConsultationService
from src.hospital.services.gateway.proxy import ReverseProxy
from src.hospital.services.users.service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_center_service(request: Request) -> CenterService:
    return request.app.state.center_service


def get_specialty_service(request: Request) -> SpecialtyService:
    return request.app.state.specialty_service


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_doctor_service(request: Request) -> DoctorService:
    return request.app.state.doctor_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_consultation_service(request: Request) -> ConsultationService:
    return request.app.state.consultation_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_reverse_proxy(request: Request) -> ReverseProxy:
    return request.app.state.reverse_proxy


async def get_consultation_scope(
    centro_id: Optional[int] = Query(None, gt=0),
    claims: SessionClaims = Depends(require_doctor_or_admin),
) -> ConsultationScope:
    """Authenticate, role-check, then narrow to the caller's rows.

    ``centro_id`` is honoured for admins only; doctors are always pinned to
    their own centre.
    """

    return ConsultationScope.for_claims(claims, requested_centro_id=centro_id)
