from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select

from src.hospital.domain.models.consultation import Consultation
from src.hospital.infra.db.models import ConsultationORM
from src.hospital.infra.db.repositories import ConsultationRepository
from src.hospital.infra.db.sql_base import SqlRepository


class SqlConsultationRepository(SqlRepository[Consultation], ConsultationRepository):
    orm_class = ConsultationORM
    model = Consultation

    async def list_by_filters(
        self,
        *,
        doctor_id: Optional[int] = None,
        centro_id: Optional[int] = None,
        fecha_desde: Optional[datetime] = None,
        fecha_hasta: Optional[datetime] = None,
    ) -> List[Consultation]:
        query = select(ConsultationORM)
        if doctor_id is not None:
            query = query.where(ConsultationORM.doctor_id == doctor_id)
        if centro_id is not None:
            query = query.where(ConsultationORM.centro_id == centro_id)
        if fecha_desde is not None:
            query = query.where(ConsultationORM.fecha >= fecha_desde)
        if fecha_hasta is not None:
            query = query.where(ConsultationORM.fecha <= fecha_hasta)

        async with self._session_factory() as session:
            result = await session.execute(query.order_by(ConsultationORM.fecha, ConsultationORM.id))
            return [self._to_domain(row) for row in result.scalars().all()]
