from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


# Placeholder shipped for local runs; deployments must override JWT_SECRET.
DEFAULT_JWT_SECRET = "your-secret-key-here-must-be-at-least-32-characters-long"


@dataclass
class Settings:
    """Centralized settings shared by the admin, consultations and gateway apps.

    Environment variables are read once at import time. Application factories
    accept an explicit instance, which is how tests configure the services.
    """

    # Token signing. The three services must agree on secret/issuer/audience.
    jwt_secret: str = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    jwt_issuer: str = os.getenv("JWT_ISSUER", "HospitalGateway")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "HospitalSystem")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    token_ttl_hours: int = int(os.getenv("TOKEN_TTL_HOURS", "8"))

    # Upstream services as seen from the gateway.
    admin_api_url: str = os.getenv("ADMIN_API_URL", "http://localhost:3000")
    consultas_api_url: str = os.getenv("CONSULTAS_API_URL", "http://localhost:4000")
    gateway_timeout_seconds: float = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "60"))

    # Upper bound for any single request handled by one of the apps.
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "65"))

    # Optional database configuration. Without it the in-memory repositories
    # stay active.
    database_url: Optional[str] = os.getenv("DATABASE_URL")
    use_sql_repos: bool = os.getenv("USE_SQL_REPOS", "false").lower() == "true"

    # Shared secret protecting the credential endpoints the gateway calls on
    # the admin service. Unset means the endpoints are open.
    internal_api_key: Optional[str] = os.getenv("INTERNAL_API_KEY")

    # Google sign-in. Google login is refused when no client id is configured.
    google_client_id: Optional[str] = os.getenv("GOOGLE_CLIENT_ID")
    google_tokeninfo_url: str = os.getenv("GOOGLE_TOKENINFO_URL", "https://oauth2.googleapis.com/tokeninfo")

    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Comma-separated origins, "*" for local development.
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "*")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Load the demo centres/doctors/users into the admin service on start-up.
    seed_demo_data: bool = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()] or ["*"]


settings = Settings()
