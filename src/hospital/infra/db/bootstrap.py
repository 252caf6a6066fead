from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from src.hospital.config import Settings
from src.hospital.infra.db import inmemory
from src.hospital.infra.db.models import AdminBase, ConsultationsBase
from src.hospital.infra.db.repositories import (
    CenterRepository,
    ConsultationRepository,
    DoctorRepository,
    EmployeeRepository,
    SpecialtyRepository,
    UserRepository,
)
from src.hospital.infra.db.session import create_engine_and_session_factory
from src.hospital.infra.db.sql_admin import (
    SqlCenterRepository,
    SqlDoctorRepository,
    SqlEmployeeRepository,
    SqlSpecialtyRepository,
    SqlUserRepository,
)
from src.hospital.infra.db.sql_consultations import SqlConsultationRepository

logger = logging.getLogger("hospital.db")


@dataclass
class AdminRepositories:
    centers: CenterRepository
    specialties: SpecialtyRepository
    employees: EmployeeRepository
    doctors: DoctorRepository
    users: UserRepository
    engine: Optional[AsyncEngine] = None


@dataclass
class ConsultationRepositories:
    consultations: ConsultationRepository
    engine: Optional[AsyncEngine] = None


def sql_enabled(settings: Settings) -> bool:
    """SQL repositories are used only when requested and a URL is configured.

    A request without ``DATABASE_URL`` is logged and falls back to the
    in-memory repositories.
    """

    if not settings.use_sql_repos:
        return False
    if not settings.database_url:
        logger.warning("USE_SQL_REPOS is set but DATABASE_URL is empty; using in-memory repositories")
        return False
    return True


def build_admin_repositories(settings: Settings) -> AdminRepositories:
    if not sql_enabled(settings):
        return AdminRepositories(
            centers=inmemory.InMemoryCenterRepository(),
            specialties=inmemory.InMemorySpecialtyRepository(),
            employees=inmemory.InMemoryEmployeeRepository(),
            doctors=inmemory.InMemoryDoctorRepository(),
            users=inmemory.InMemoryUserRepository(),
        )

    engine, session_factory = create_engine_and_session_factory(settings.database_url)  # type: ignore[arg-type]
    return AdminRepositories(
        centers=SqlCenterRepository(session_factory),
        specialties=SqlSpecialtyRepository(session_factory),
        employees=SqlEmployeeRepository(session_factory),
        doctors=SqlDoctorRepository(session_factory),
        users=SqlUserRepository(session_factory),
        engine=engine,
    )


def build_consultation_repositories(settings: Settings) -> ConsultationRepositories:
    if not sql_enabled(settings):
        return ConsultationRepositories(consultations=inmemory.InMemoryConsultationRepository())

    engine, session_factory = create_engine_and_session_factory(settings.database_url)  # type: ignore[arg-type]
    return ConsultationRepositories(consultations=SqlConsultationRepository(session_factory), engine=engine)


async def create_admin_tables(engine: AsyncEngine) -> None:  # pragma: no cover - needs a database
    # Tables are created on start-up; there is no migration tooling.
    async with engine.begin() as conn:
        await conn.run_sync(AdminBase.metadata.create_all)


async def create_consultation_tables(engine: AsyncEngine) -> None:  # pragma: no cover - needs a database
    async with engine.begin() as conn:
        await conn.run_sync(ConsultationsBase.metadata.create_all)
