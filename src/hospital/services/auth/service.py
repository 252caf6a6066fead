from __future__ import annotations

from src.hospital.domain.models.claims import IssuedToken, SessionClaims
from src.hospital.domain.models.user import UserIdentity
from src.hospital.errors import InvalidCredentialsError, UnregisteredUserError
from src.hospital.services.audit.service import audit_service
from src.hospital.services.auth.directory import AdminUserDirectory
from src.hospital.services.auth.google import GoogleIdentityVerifier
from src.hospital.services.auth.tokens import TokenService


class AuthService:
    """Login flows owned by the gateway: credentials or Google in, token out."""

    def __init__(
        self,
        *,
        directory: AdminUserDirectory,
        tokens: TokenService,
        google: GoogleIdentityVerifier,
    ) -> None:
        self._directory = directory
        self._tokens = tokens
        self._google = google

    async def login(self, username: str, password: str) -> tuple[IssuedToken, UserIdentity]:
        try:
            identity = await self._directory.validate_credentials(username, password)
        except InvalidCredentialsError:
            audit_service.log_event(action="login_failed", resource_type="session", extra={"method": "password"})
            raise
        return self._issue(identity, method="password"), identity

    async def google_login(self, credential: str) -> tuple[IssuedToken, UserIdentity]:
        google_identity = await self._google.verify(credential)
        identity = await self._directory.find_by_email(google_identity.email)
        if identity is None:
            audit_service.log_event(
                action="login_failed",
                resource_type="session",
                extra={"method": "google", "reason": "unregistered"},
            )
            raise UnregisteredUserError(email=google_identity.email, name=google_identity.name)
        return self._issue(identity, method="google"), identity

    def validate_token(self, token: str) -> SessionClaims:
        return self._tokens.validate(token)

    def _issue(self, identity: UserIdentity, *, method: str) -> IssuedToken:
        issued = self._tokens.issue(identity)
        audit_service.log_event(
            action="login",
            resource_type="session",
            resource_id=str(identity.id),
            subject=f"user:{identity.id}",
            extra={"method": method, "role": identity.role.value},
        )
        return issued
