from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_employee_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.employee import EmployeeCreate, EmployeeDetail, EmployeeUpdate
from src.hospital.security import require_admin
from src.hospital.services.admin.service import EmployeeService

router = APIRouter(prefix="/empleados", tags=["empleados"], dependencies=[Depends(require_admin)])


@router.post("", response_model=EmployeeDetail, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeDetail:
    return await service.detail(await service.create(payload))


@router.get("", response_model=List[EmployeeDetail])
async def list_employees(service: EmployeeService = Depends(get_employee_service)) -> List[EmployeeDetail]:
    return await service.list_detailed()


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)) -> EmployeeDetail:
    return await service.detail(await service.get(employee_id))


@router.put("/{employee_id}", response_model=EmployeeDetail)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeDetail:
    return await service.detail(await service.update(employee_id, payload))


@router.delete("/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> DeleteResponse:
    await service.delete(employee_id)
    return DeleteResponse(message="Employee deleted", id=employee_id)
