from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.hospital.api.routes_system import router as system_router
from src.hospital.config import DEFAULT_JWT_SECRET, Settings
from src.hospital.errors import register_exception_handlers
from src.hospital.middleware import RequestTimeoutMiddleware
from src.hospital.services.auth.tokens import TokenService

logger = logging.getLogger("hospital.startup")


def install_common(app: FastAPI, settings: Settings, service_name: str) -> None:
    """Wiring every application shares: state, CORS, timeouts, errors, /health."""

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("%s is signing tokens with the default JWT_SECRET; set JWT_SECRET before deploying", service_name)

    app.state.settings = settings
    app.state.service_name = service_name
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
    # CORS configuration, permissive by default for development. Tighten via
    # CORS_ALLOW_ORIGINS in production deployments.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(system_router)
