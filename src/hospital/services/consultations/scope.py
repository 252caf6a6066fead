from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.hospital.domain.models.claims import SessionClaims
from src.hospital.domain.models.consultation import Consultation
from src.hospital.domain.models.user import UserRole
from src.hospital.errors import AuthorizationError


@dataclass(frozen=True)
class ConsultationScope:
    """Row filter derived from the caller's claims.

    ``None`` means unrestricted on that column. Admins are unrestricted
    except for an optional centre filter they ask for themselves; doctors
    are pinned to their own doctor id and centre.
    """

    doctor_id: Optional[int] = None
    centro_id: Optional[int] = None
    is_admin: bool = False

    @classmethod
    def for_claims(cls, claims: SessionClaims, requested_centro_id: Optional[int] = None) -> "ConsultationScope":
        if claims.role == UserRole.ADMIN:
            return cls(centro_id=requested_centro_id, is_admin=True)

        if claims.role == UserRole.DOCTOR:
            if claims.centro_id is None:
                raise AuthorizationError("Doctor has no assigned center")
            if claims.doctor_id is None:
                raise AuthorizationError("User is not linked to a doctor record")
            return cls(doctor_id=claims.doctor_id, centro_id=claims.centro_id)

        raise AuthorizationError("Access denied for role " + claims.role.value)

    def allows(self, consultation: Consultation) -> bool:
        if self.doctor_id is not None and consultation.doctor_id != self.doctor_id:
            return False
        if self.centro_id is not None and consultation.centro_id != self.centro_id:
            return False
        return True
