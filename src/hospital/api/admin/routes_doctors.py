from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_doctor_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.doctor import DoctorCreate, DoctorDetail, DoctorUpdate
from src.hospital.security import require_admin
from src.hospital.services.admin.service import DoctorService

router = APIRouter(prefix="/medicos", tags=["medicos"], dependencies=[Depends(require_admin)])


@router.post("", response_model=DoctorDetail, status_code=status.HTTP_201_CREATED)
async def create_doctor(payload: DoctorCreate, service: DoctorService = Depends(get_doctor_service)) -> DoctorDetail:
    return await service.detail(await service.create(payload))


@router.get("", response_model=List[DoctorDetail])
async def list_doctors(service: DoctorService = Depends(get_doctor_service)) -> List[DoctorDetail]:
    """All doctors with their specialty and centre inlined."""
    return await service.list_detailed()


@router.get("/{doctor_id}", response_model=DoctorDetail)
async def get_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)) -> DoctorDetail:
    return await service.detail(await service.get(doctor_id))


@router.put("/{doctor_id}", response_model=DoctorDetail)
async def update_doctor(
    doctor_id: int,
    payload: DoctorUpdate,
    service: DoctorService = Depends(get_doctor_service),
) -> DoctorDetail:
    return await service.detail(await service.update(doctor_id, payload))


@router.delete("/{doctor_id}", response_model=DeleteResponse)
async def delete_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)) -> DeleteResponse:
    await service.delete(doctor_id)
    return DeleteResponse(message="Doctor deleted", id=doctor_id)
