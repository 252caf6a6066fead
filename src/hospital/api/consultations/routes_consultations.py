from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_consultation_scope, get_consultation_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.consultation import Consultation, ConsultationCreate, ConsultationUpdate
from src.hospital.services.consultations.scope import ConsultationScope
from src.hospital.services.consultations.service import ConsultationService

router = APIRouter(prefix="/consultas", tags=["consultas"])


@router.post("", response_model=Consultation, status_code=status.HTTP_201_CREATED)
async def create_consultation(
    payload: ConsultationCreate,
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> Consultation:
    """Book a consultation.

    Admins must name ``doctor_id`` and ``centro_id``; for doctors both are
    taken from the session.
    """

    return await service.create(payload, scope)


@router.get("", response_model=List[Consultation])
async def list_consultations(
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> List[Consultation]:
    return await service.list_all(scope)


@router.get("/{consultation_id}", response_model=Consultation)
async def get_consultation(
    consultation_id: int,
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> Consultation:
    return await service.get(consultation_id, scope)


@router.put("/{consultation_id}", response_model=Consultation)
async def update_consultation(
    consultation_id: int,
    payload: ConsultationUpdate,
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> Consultation:
    return await service.update(consultation_id, payload, scope)


@router.delete("/{consultation_id}", response_model=DeleteResponse)
async def delete_consultation(
    consultation_id: int,
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> DeleteResponse:
    await service.delete(consultation_id, scope)
    return DeleteResponse(message="Consultation deleted", id=consultation_id)
