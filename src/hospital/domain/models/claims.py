from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.hospital.domain.models.user import UserRole


class SessionClaims(BaseModel):
    """Identity facts carried by a validated session token."""

    user_id: int
    username: str
    role: UserRole
    centro_id: Optional[int] = None
    doctor_id: Optional[int] = None
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class IssuedToken(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
