from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from src.hospital.domain.models.user import UserIdentity
from src.hospital.errors import InvalidCredentialsError, UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger("hospital.auth.directory")

ADMIN_SERVICE = "admin-api"


class AdminUserDirectory:
    """Gateway-side client for the admin service's credential endpoints.

    The gateway owns no user storage; every lookup is one POST to the admin
    service, made without retries.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str, internal_key: Optional[str] = None) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._headers = {"X-Internal-Key": internal_key} if internal_key else {}

    async def validate_credentials(self, username: str, password: str) -> UserIdentity:
        response = await self._post("/usuarios/validate", {"username": username, "password": password})
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise InvalidCredentialsError()
        return self._identity_from(response)

    async def find_by_email(self, correo: str) -> Optional[UserIdentity]:
        response = await self._post("/usuarios/by-email", {"correo": correo})
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        return self._identity_from(response)

    async def _post(self, path: str, body: Dict[str, Any]) -> httpx.Response:
        url = self._base_url + path
        try:
            return await self._client.post(url, json=body, headers=self._headers)
        except httpx.TimeoutException as exc:
            logger.error("Timed out calling %s: %s", url, exc.__class__.__name__)
            raise UpstreamTimeoutError(ADMIN_SERVICE) from exc
        except httpx.TransportError as exc:
            logger.error("Could not reach %s: %s", url, exc.__class__.__name__)
            raise UpstreamUnavailableError(ADMIN_SERVICE) from exc

    @staticmethod
    def _identity_from(response: httpx.Response) -> UserIdentity:
        if response.status_code != httpx.codes.OK:
            logger.error("Admin service answered %s on %s", response.status_code, response.request.url.path)
            raise UpstreamUnavailableError(ADMIN_SERVICE, "Unexpected response from admin service")
        try:
            return UserIdentity.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            logger.error("Malformed identity from admin service: %s", exc.__class__.__name__)
            raise UpstreamUnavailableError(ADMIN_SERVICE, "Unexpected response from admin service") from exc
