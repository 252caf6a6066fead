from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC and normalise aware ones to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PartialUpdate(BaseModel):
    """Base for PUT payloads with partial-update semantics.

    Every field is optional so callers can send only what changes, but the
    names listed in ``non_nullable`` may not be explicitly set to ``null``.
    """

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "PartialUpdate":
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
