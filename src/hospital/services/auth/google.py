from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from src.hospital.errors import AuthenticationError, InvalidTokenError, UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger("hospital.auth.google")

GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


@dataclass(frozen=True)
class GoogleIdentity:
    email: str
    name: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GoogleIdentityVerifier:
    """Verifies Google ID tokens through the ``tokeninfo`` endpoint.

    Google checks the signature; this class checks audience, issuer, expiry
    and that the email address is verified.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        client_id: Optional[str],
        tokeninfo_url: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._client_id = client_id
        self._tokeninfo_url = tokeninfo_url
        self._clock = clock

    async def verify(self, credential: str) -> GoogleIdentity:
        if not self._client_id:
            raise AuthenticationError("Google login is not configured")

        try:
            response = await self._client.get(self._tokeninfo_url, params={"id_token": credential})
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError("google") from exc
        except httpx.TransportError as exc:
            logger.error("Could not reach Google tokeninfo: %s", exc.__class__.__name__)
            raise UpstreamUnavailableError("google") from exc

        if response.status_code != httpx.codes.OK:
            logger.info("Google rejected ID token with status %s", response.status_code)
            raise InvalidTokenError("Invalid Google token")

        try:
            info: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise InvalidTokenError("Invalid Google token") from exc

        problem = self._check(info)
        if problem is not None:
            logger.info("Google ID token refused: %s", problem)
            raise InvalidTokenError("Invalid Google token")

        return GoogleIdentity(email=info["email"], name=info.get("name"))

    def _check(self, info: Dict[str, Any]) -> Optional[str]:
        if info.get("aud") != self._client_id:
            return "audience mismatch"
        if info.get("iss") not in GOOGLE_ISSUERS:
            return "unexpected issuer"
        try:
            expires = int(info.get("exp", 0))
        except (TypeError, ValueError):
            return "malformed expiry"
        if expires <= int(self._clock().timestamp()):
            return "expired"
        if not info.get("email"):
            return "no email"
        if str(info.get("email_verified", "")).lower() != "true":
            return "email not verified"
        return None
