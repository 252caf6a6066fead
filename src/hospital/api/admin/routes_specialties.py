from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_specialty_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.specialty import Specialty, SpecialtyCreate, SpecialtyUpdate
from src.hospital.security import require_admin
from src.hospital.services.admin.service import SpecialtyService

router = APIRouter(prefix="/especialidades", tags=["especialidades"], dependencies=[Depends(require_admin)])


@router.post("", response_model=Specialty, status_code=status.HTTP_201_CREATED)
async def create_specialty(
    payload: SpecialtyCreate,
    service: SpecialtyService = Depends(get_specialty_service),
) -> Specialty:
    return await service.create(payload)


@router.get("", response_model=List[Specialty])
async def list_specialties(service: SpecialtyService = Depends(get_specialty_service)) -> List[Specialty]:
    return await service.list_all()


@router.get("/{specialty_id}", response_model=Specialty)
async def get_specialty(specialty_id: int, service: SpecialtyService = Depends(get_specialty_service)) -> Specialty:
    return await service.get(specialty_id)


@router.put("/{specialty_id}", response_model=Specialty)
async def update_specialty(
    specialty_id: int,
    payload: SpecialtyUpdate,
    service: SpecialtyService = Depends(get_specialty_service),
) -> Specialty:
    return await service.update(specialty_id, payload)


@router.delete("/{specialty_id}", response_model=DeleteResponse)
async def delete_specialty(
    specialty_id: int,
    service: SpecialtyService = Depends(get_specialty_service),
) -> DeleteResponse:
    await service.delete(specialty_id)
    return DeleteResponse(message="Specialty deleted", id=specialty_id)
