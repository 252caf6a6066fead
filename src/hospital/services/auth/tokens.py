from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from src.hospital.config import Settings
from src.hospital.domain.models.claims import IssuedToken, SessionClaims
from src.hospital.domain.models.user import UserIdentity
from src.hospital.errors import InvalidTokenError

logger = logging.getLogger("hospital.auth.tokens")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and validates signed session tokens (JWT, HMAC).

    The gateway issues tokens; every service validates them with the same
    secret, issuer and audience. Expiry is checked with zero leeway.
    """

    def __init__(
        self,
        *,
        secret: str,
        issuer: str,
        audience: str,
        ttl: timedelta = timedelta(hours=8),
        algorithm: str = "HS256",
        clock: Clock = _utcnow,
    ) -> None:
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            ttl=timedelta(hours=settings.token_ttl_hours),
            algorithm=settings.jwt_algorithm,
        )

    def issue(self, identity: UserIdentity) -> IssuedToken:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload: Dict[str, Any] = {
            "sub": str(identity.id),
            "username": identity.username,
            "role": identity.role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self._issuer,
            "aud": self._audience,
        }
        if identity.centro_id is not None:
            payload["centro_id"] = identity.centro_id
        if identity.doctor_id is not None:
            payload["doctor_id"] = identity.doctor_id

        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    def validate(self, token: str) -> SessionClaims:
        """Return the claims of a valid token or raise InvalidTokenError.

        Expired, tampered, foreign and malformed tokens all produce the same
        error so callers learn nothing about why a token was refused.
        """

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require_exp": True, "require_iat": True, "require_sub": True},
            )
            return SessionClaims(
                user_id=int(payload["sub"]),
                username=payload["username"],
                role=payload["role"],
                centro_id=payload.get("centro_id"),
                doctor_id=payload.get("doctor_id"),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (JWTError, KeyError, TypeError, ValueError, PydanticValidationError) as exc:
            logger.info("Rejected session token: %s", exc.__class__.__name__)
            raise InvalidTokenError() from exc
