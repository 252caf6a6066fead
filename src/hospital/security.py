from __future__ import annotations

import hmac
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from src.hospital.domain.models.claims import SessionClaims
from src.hospital.domain.models.user import UserRole
from src.hospital.errors import AuthenticationError, AuthorizationError, MissingTokenError
from src.hospital.services.auth.tokens import TokenService

_bearer_scheme = HTTPBearer(auto_error=False)

# Shared secret presented by the gateway on the admin service's credential
# endpoints.
_internal_key_header = APIKeyHeader(name="X-Internal-Key", auto_error=False)

# Stable identifier of the authenticated caller for the in-flight request,
# read by the audit logger.
_current_subject: ContextVar[Optional[str]] = ContextVar("current_subject", default=None)


def get_current_subject() -> Optional[str]:
    """Return the current subject identifier, if any.

    Set by :func:`authenticate_token`; ``None`` for unauthenticated requests.
    """

    return _current_subject.get()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def authenticate_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(_bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """First step of every protected route: bearer token to claims.

    The validated claims are also attached to ``request.state.claims``.
    """

    _current_subject.set(None)
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    claims = token_service.validate(credentials.credentials)
    request.state.claims = claims
    _current_subject.set(f"user:{claims.user_id}")
    return claims


def require_roles(*allowed: UserRole) -> Callable[..., Awaitable[SessionClaims]]:
    """Build a dependency that admits only the given roles.

    It depends on :func:`authenticate_token`, so the role check always runs
    against a validated identity.
    """

    allowed_roles = frozenset(allowed)

    async def _require(claims: SessionClaims = Depends(authenticate_token)) -> SessionClaims:
        if claims.role not in allowed_roles:
            raise AuthorizationError("Access denied for role " + claims.role.value)
        return claims

    return _require


require_admin = require_roles(UserRole.ADMIN)
require_doctor_or_admin = require_roles(UserRole.ADMIN, UserRole.DOCTOR)


async def require_internal_key(
    request: Request,
    api_key: Optional[str] = Security(_internal_key_header),
) -> None:
    """Guard for service-to-service endpoints.

    - If INTERNAL_API_KEY is not configured this is a no-op.
    - Otherwise the X-Internal-Key header must match it exactly.
    """

    expected = request.app.state.settings.internal_api_key
    if not expected:
        return
    if not api_key or not hmac.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError("Invalid or missing internal API key")
