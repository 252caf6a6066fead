from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from src.hospital.api.common import install_common
from src.hospital.api.gateway.routes_auth import router as auth_router
from src.hospital.api.gateway.routes_proxy import router as proxy_router
from src.hospital.config import Settings, settings as default_settings
from src.hospital.logging_config import configure_logging
from src.hospital.services.auth.directory import AdminUserDirectory
from src.hospital.services.auth.google import GoogleIdentityVerifier
from src.hospital.services.auth.service import AuthService
from src.hospital.services.gateway.proxy import ReverseProxy, UpstreamRoute


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the gateway.

    ``http_client`` is shared by the proxy, the admin directory and the Google
    verifier. When omitted one is created here and closed on shutdown.
    """

    settings = settings or default_settings
    configure_logging(settings.log_level)
    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(settings.gateway_timeout_seconds))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(title="Hospital Gateway", lifespan=lifespan)
    install_common(app, settings, "gateway")

    app.state.reverse_proxy = ReverseProxy(
        client,
        [
            UpstreamRoute(
                prefix="/admin",
                base_url=settings.admin_api_url,
                service="admin-api",
                private_paths=frozenset({"/usuarios/validate", "/usuarios/by-email"}),
            ),
            UpstreamRoute(prefix="/consultas", base_url=settings.consultas_api_url, service="consultas-api"),
        ],
    )
    app.state.auth_service = AuthService(
        directory=AdminUserDirectory(client, settings.admin_api_url, settings.internal_api_key),
        tokens=app.state.token_service,
        google=GoogleIdentityVerifier(
            client,
            client_id=settings.google_client_id,
            tokeninfo_url=settings.google_tokeninfo_url,
        ),
    )

    app.include_router(auth_router)
    # Catch-all proxy route goes last.
    app.include_router(proxy_router)
    return app


app = create_app()
