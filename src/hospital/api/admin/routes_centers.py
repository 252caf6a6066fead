from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_center_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.center import Center, CenterCreate, CenterUpdate
from src.hospital.security import require_admin
from src.hospital.services.admin.service import CenterService

router = APIRouter(prefix="/centros", tags=["centros"], dependencies=[Depends(require_admin)])


@router.post("", response_model=Center, status_code=status.HTTP_201_CREATED)
async def create_center(payload: CenterCreate, service: CenterService = Depends(get_center_service)) -> Center:
    return await service.create(payload)


@router.get("", response_model=List[Center])
async def list_centers(service: CenterService = Depends(get_center_service)) -> List[Center]:
    return await service.list_all()


@router.get("/{center_id}", response_model=Center)
async def get_center(center_id: int, service: CenterService = Depends(get_center_service)) -> Center:
    return await service.get(center_id)


@router.put("/{center_id}", response_model=Center)
async def update_center(
    center_id: int,
    payload: CenterUpdate,
    service: CenterService = Depends(get_center_service),
) -> Center:
    return await service.update(center_id, payload)


@router.delete("/{center_id}", response_model=DeleteResponse)
async def delete_center(center_id: int, service: CenterService = Depends(get_center_service)) -> DeleteResponse:
    await service.delete(center_id)
    return DeleteResponse(message="Center deleted", id=center_id)
