from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from src.hospital.api.common import install_common
from src.hospital.api.consultations.routes_consultations import router as consultations_router
from src.hospital.api.consultations.routes_reports import router as reports_router
from src.hospital.config import Settings, settings as default_settings
from src.hospital.infra.db.bootstrap import (
    ConsultationRepositories,
    build_consultation_repositories,
    create_consultation_tables,
)
from src.hospital.logging_config import configure_logging
from src.hospital.services.consultations.service import ConsultationService


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[ConsultationRepositories] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    repos = repositories or build_consultation_repositories(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if repos.engine is not None:
            await create_consultation_tables(repos.engine)
        yield
        if repos.engine is not None:
            await repos.engine.dispose()

    app = FastAPI(title="Hospital Consultas API", lifespan=lifespan)
    install_common(app, settings, "consultas-api")
    app.state.consultation_service = ConsultationService(repos.consultations)

    app.include_router(consultations_router)
    app.include_router(reports_router)
    return app


app = create_app()
