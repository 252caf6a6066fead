from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from src.hospital.api.admin.routes_centers import router as centers_router
from src.hospital.api.admin.routes_doctors import router as doctors_router
from src.hospital.api.admin.routes_employees import router as employees_router
from src.hospital.api.admin.routes_setup import router as setup_router
from src.hospital.api.admin.routes_specialties import router as specialties_router
from src.hospital.api.admin.routes_users import internal_router as users_internal_router
from src.hospital.api.admin.routes_users import router as users_router
from src.hospital.api.common import install_common
from src.hospital.config import Settings, settings as default_settings
from src.hospital.infra.db.bootstrap import AdminRepositories, build_admin_repositories, create_admin_tables
from src.hospital.infra.db.seed import seed_demo_data
from src.hospital.logging_config import configure_logging
from src.hospital.services.admin.service import CenterService, DoctorService, EmployeeService, SpecialtyService
from src.hospital.services.auth.passwords import PasswordHasher
from src.hospital.services.users.service import UserService


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[AdminRepositories] = None,
) -> FastAPI:
    """Build the admin service: centres, specialties, employees, doctors, users."""

    settings = settings or default_settings
    configure_logging(settings.log_level)
    repos = repositories or build_admin_repositories(settings)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    center_service = CenterService(repos.centers)
    specialty_service = SpecialtyService(repos.specialties)
    employee_service = EmployeeService(repos.employees, repos.centers)
    doctor_service = DoctorService(
        repos.doctors,
        centers=repos.centers,
        specialties=repos.specialties,
        users=repos.users,
    )
    user_service = UserService(repos.users, centers=repos.centers, doctors=repos.doctors, hasher=hasher)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if repos.engine is not None:
            await create_admin_tables(repos.engine)
        if settings.seed_demo_data:
            await seed_demo_data(
                centers=center_service,
                specialties=specialty_service,
                employees=employee_service,
                doctors=doctor_service,
                users=user_service,
            )
        yield
        if repos.engine is not None:
            await repos.engine.dispose()

    app = FastAPI(title="Hospital Admin API", lifespan=lifespan)
    install_common(app, settings, "admin-api")

    app.state.center_service = center_service
    app.state.specialty_service = specialty_service
    app.state.employee_service = employee_service
    app.state.doctor_service = doctor_service
    app.state.user_service = user_service

    app.include_router(setup_router)
    app.include_router(users_internal_router)
    app.include_router(centers_router)
    app.include_router(employees_router)
    app.include_router(specialties_router)
    app.include_router(doctors_router)
    app.include_router(users_router)
    return app


app = create_app()
