from typing import Callable, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from src.hospital import admin_main, consultas_main
from src.hospital.config import Settings
from src.hospital.domain.models.user import UserIdentity, UserRole
from src.hospital.services.auth.tokens import TokenService

HeaderFactory = Callable[..., Dict[str, str]]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret="test-secret-that-is-long-enough-for-hs256-signing",
        admin_api_url="http://admin.internal",
        consultas_api_url="http://consultas.internal",
        internal_api_key=None,
        google_client_id="client-123.apps.googleusercontent.com",
        google_tokeninfo_url="https://oauth2.example.com/tokeninfo",
        bcrypt_rounds=4,
        log_level="WARNING",
        seed_demo_data=False,
        use_sql_repos=False,
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def auth_headers(token_service: TokenService) -> HeaderFactory:
    """Build an Authorization header for a synthetic identity."""

    def _make(
        role: UserRole = UserRole.ADMIN,
        *,
        user_id: int = 1,
        centro_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
    ) -> Dict[str, str]:
        identity = UserIdentity(
            id=user_id,
            username=f"{role.value}-{user_id}",
            role=role,
            centro_id=centro_id,
            doctor_id=doctor_id,
        )
        return {"Authorization": f"Bearer {token_service.issue(identity).token}"}

    return _make


@pytest.fixture
def admin_app(settings: Settings):
    return admin_main.create_app(settings)


@pytest.fixture
async def admin_client(admin_app):
    async with AsyncClient(transport=ASGITransport(app=admin_app), base_url="http://admin") as client:
        yield client


@pytest.fixture
def consultas_app(settings: Settings):
    return consultas_main.create_app(settings)


@pytest.fixture
async def consultas_client(consultas_app):
    async with AsyncClient(transport=ASGITransport(app=consultas_app), base_url="http://consultas") as client:
        yield client
