from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional, Tuple

from src.hospital.domain.models.consultation import (
    Consultation,
    ConsultationCreate,
    ConsultationUpdate,
    DoctorReport,
)
from src.hospital.errors import AuthorizationError, FieldError, NotFoundError, ValidationError
from src.hospital.infra.db.repositories import ConsultationRepository
from src.hospital.services.audit.service import audit_service
from src.hospital.services.consultations.scope import ConsultationScope

logger = logging.getLogger("hospital.consultations")


def parse_report_bound(raw: Optional[str], *, end_of_day: bool) -> Optional[datetime]:
    """Parse a ``from``/``to`` query value into an aware UTC datetime.

    Accepts ISO dates and datetimes. A bare date is widened to the start of
    the day, or to its last microsecond when ``end_of_day`` is set. Raises
    ``ValueError`` on anything else.
    """

    if raw is None or raw == "":
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    if len(text) == 10:
        day = date.fromisoformat(text)
        return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)

    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ConsultationService:
    def __init__(self, repository: ConsultationRepository) -> None:
        self._repository = repository

    async def create(self, payload: ConsultationCreate, scope: ConsultationScope) -> Consultation:
        data = payload.model_dump()
        if scope.is_admin:
            errors = [
                FieldError(field=name, message="Field required")
                for name in ("doctor_id", "centro_id")
                if data.get(name) is None
            ]
            if errors:
                raise ValidationError(errors)
        else:
            # Doctors always book under their own identity.
            data["doctor_id"] = scope.doctor_id
            data["centro_id"] = scope.centro_id

        consultation = await self._repository.add(data)
        audit_service.log_event(
            action="create",
            resource_type="consulta",
            resource_id=str(consultation.id),
            extra={"doctor_id": consultation.doctor_id, "centro_id": consultation.centro_id},
        )
        return consultation

    async def list_all(self, scope: ConsultationScope) -> List[Consultation]:
        return await self._repository.list_by_filters(doctor_id=scope.doctor_id, centro_id=scope.centro_id)

    async def get(self, consultation_id: int, scope: ConsultationScope) -> Consultation:
        consultation = await self._repository.get(consultation_id)
        if consultation is None:
            raise NotFoundError("Consultation not found")
        if not scope.allows(consultation):
            raise AuthorizationError("Consultation is outside your scope")
        return consultation

    async def update(
        self,
        consultation_id: int,
        payload: ConsultationUpdate,
        scope: ConsultationScope,
    ) -> Consultation:
        await self.get(consultation_id, scope)
        changes = payload.changes()
        if not scope.is_admin:
            changes.pop("doctor_id", None)
            changes.pop("centro_id", None)

        updated = await self._repository.update(consultation_id, changes)
        if updated is None:
            raise NotFoundError("Consultation not found")
        audit_service.log_event(
            action="update",
            resource_type="consulta",
            resource_id=str(consultation_id),
            extra={"fields": sorted(changes)},
        )
        return updated

    async def delete(self, consultation_id: int, scope: ConsultationScope) -> None:
        await self.get(consultation_id, scope)
        if not await self._repository.delete(consultation_id):
            raise NotFoundError("Consultation not found")
        audit_service.log_event(action="delete", resource_type="consulta", resource_id=str(consultation_id))

    async def report_by_doctor(
        self,
        doctor_id: int,
        scope: ConsultationScope,
        *,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> DoctorReport:
        """Consultations of one doctor inside an optional inclusive date window."""

        fecha_desde, fecha_hasta = self._parse_window(date_from, date_to)
        effective_doctor_id = doctor_id if scope.is_admin else scope.doctor_id
        if not scope.is_admin and doctor_id != scope.doctor_id:
            logger.info("Doctor %s requested report for doctor %s; using own id", scope.doctor_id, doctor_id)

        consultas = await self._repository.list_by_filters(
            doctor_id=effective_doctor_id,
            centro_id=scope.centro_id,
            fecha_desde=fecha_desde,
            fecha_hasta=fecha_hasta,
        )
        return DoctorReport(doctor_id=effective_doctor_id, total=len(consultas), consultas=consultas)

    @staticmethod
    def _parse_window(
        date_from: Optional[str], date_to: Optional[str]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        errors: List[FieldError] = []
        bounds: List[Optional[datetime]] = []
        for name, raw, end_of_day in (("from", date_from, False), ("to", date_to, True)):
            try:
                bounds.append(parse_report_bound(raw, end_of_day=end_of_day))
            except ValueError:
                bounds.append(None)
                errors.append(FieldError(field=name, message="Invalid date", location="query"))
        if errors:
            raise ValidationError(errors)
        return bounds[0], bounds[1]
