from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from src.hospital.errors import ConflictError
from src.hospital.infra.db.repositories import CrudRepository, ModelT
from src.hospital.infra.db.session import SessionFactory


def _column_value(value: Any) -> Any:
    # Enums are stored by value.
    return getattr(value, "value", value)


class SqlRepository(CrudRepository[ModelT], Generic[ModelT]):
    """SQLAlchemy-backed implementation of the CRUD contract.

    Each call opens its own session and commits a single-row change; the
    database provides the isolation. Unique or foreign-key violations are
    reported as ConflictError.
    """

    orm_class: Type[Any]
    model: Type[ModelT]

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def _to_domain(self, row: Any) -> ModelT:
        return self.model.model_validate(row, from_attributes=True)

    async def add(self, data: Dict[str, Any]) -> ModelT:
        async with self._session_factory() as session:
            row = self.orm_class(**{key: _column_value(value) for key, value in data.items()})
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError("A record with the same unique value already exists") from exc
            return self._to_domain(row)

    async def list_all(self) -> List[ModelT]:
        async with self._session_factory() as session:
            result = await session.execute(select(self.orm_class).order_by(self.orm_class.id))
            return [self._to_domain(row) for row in result.scalars().all()]

    async def get(self, entity_id: int) -> Optional[ModelT]:
        async with self._session_factory() as session:
            row = await session.get(self.orm_class, entity_id)
            return self._to_domain(row) if row is not None else None

    async def update(self, entity_id: int, changes: Dict[str, Any]) -> Optional[ModelT]:
        async with self._session_factory() as session:
            row = await session.get(self.orm_class, entity_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, _column_value(value))
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError("A record with the same unique value already exists") from exc
            return self._to_domain(row)

    async def delete(self, entity_id: int) -> bool:
        async with self._session_factory() as session:
            row = await session.get(self.orm_class, entity_id)
            if row is None:
                return False
            await session.delete(row)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError("The record is still referenced by other records") from exc
            return True

    async def _find_one(self, *criteria: Any) -> Optional[ModelT]:
        async with self._session_factory() as session:
            result = await session.execute(select(self.orm_class).where(*criteria).limit(1))
            row = result.scalars().first()
            return self._to_domain(row) if row is not None else None
