from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from src.hospital.api.deps import get_consultation_scope, get_consultation_service
from src.hospital.domain.models.consultation import DoctorReport
from src.hospital.services.consultations.scope import ConsultationScope
from src.hospital.services.consultations.service import ConsultationService

router = APIRouter(prefix="/reportes", tags=["reportes"])


@router.get("/doctor/{doctor_id}", response_model=DoctorReport)
async def report_by_doctor(
    doctor_id: int = Path(gt=0),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    scope: ConsultationScope = Depends(get_consultation_scope),
    service: ConsultationService = Depends(get_consultation_service),
) -> DoctorReport:
    """Consultations of one doctor between ``from`` and ``to`` (both inclusive).

    A date-only ``to`` covers that whole day. Doctors always get their own
    report regardless of the id in the path.
    """

    return await service.report_by_doctor(doctor_id, scope, date_from=date_from, date_to=date_to)
