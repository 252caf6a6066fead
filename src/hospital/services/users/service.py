from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from src.hospital.domain.models.user import (
    CENTER_BOUND_ROLES,
    InitialAdminRequest,
    User,
    UserCreate,
    UserIdentity,
    UserPublic,
    UserRole,
    UserUpdate,
)
from src.hospital.errors import (
    ConflictError,
    FieldError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.hospital.infra.db.repositories import CenterRepository, DoctorRepository, UserRepository
from src.hospital.services.admin.service import check_reference
from src.hospital.services.audit.service import audit_service
from src.hospital.services.auth.passwords import PasswordHasher

logger = logging.getLogger("hospital.users")


class UserService:
    """User management on top of the Credential Store.

    Passwords are hashed before they reach the repository and user records
    leave this service only as :class:`UserPublic` or :class:`UserIdentity`,
    never with their hash.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        centers: CenterRepository,
        doctors: DoctorRepository,
        hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._centers = centers
        self._doctors = doctors
        self._hasher = hasher

    # Queries

    async def to_public(self, user: User) -> UserPublic:
        centro = await self._centers.get(user.centro_id) if user.centro_id is not None else None
        return UserPublic(**user.model_dump(exclude={"password_hash"}), centro=centro)

    async def list_all(self) -> List[UserPublic]:
        return [await self.to_public(user) for user in await self._users.list_all()]

    async def get(self, user_id: int) -> UserPublic:
        return await self.to_public(await self._get_record(user_id))

    async def _get_record(self, user_id: int) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # Mutations

    async def create(self, payload: UserCreate) -> UserPublic:
        data = payload.model_dump(exclude={"password"})
        await self._validate(data, current=None)
        data["password_hash"] = self._hasher.hash(payload.password)

        user = await self._users.add(data)
        audit_service.log_event(
            action="create",
            resource_type="usuario",
            resource_id=str(user.id),
            extra={"role": user.role.value},
        )
        return await self.to_public(user)

    async def update(self, user_id: int, payload: UserUpdate) -> UserPublic:
        current = await self._get_record(user_id)
        changes = payload.changes()
        password = changes.pop("password", None)

        merged = {**current.model_dump(exclude={"password_hash"}), **changes}
        await self._validate(merged, current=current)
        if password is not None:
            changes["password_hash"] = self._hasher.hash(password)

        updated = await self._users.update(user_id, changes)
        if updated is None:
            raise NotFoundError("User not found")
        audit_service.log_event(
            action="update",
            resource_type="usuario",
            resource_id=str(user_id),
            extra={"fields": sorted(payload.changes())},
        )
        return await self.to_public(updated)

    async def delete(self, user_id: int) -> None:
        if await self._doctors.get_by_usuario_id(user_id) is not None:
            raise ConflictError("User is linked to a doctor record")
        if not await self._users.delete(user_id):
            raise NotFoundError("User not found")
        audit_service.log_event(action="delete", resource_type="usuario", resource_id=str(user_id))

    async def create_initial_admin(self, payload: InitialAdminRequest) -> UserPublic:
        """Bootstrap the first administrator.

        Unauthenticated but self-limiting: refused once any admin exists.
        """

        if await self._users.exists_with_role(UserRole.ADMIN):
            raise ConflictError("An administrator already exists")

        user = await self.create(
            UserCreate(
                username=payload.username,
                password=payload.password,
                correo=payload.correo,
                role=UserRole.ADMIN,
                centro_id=payload.centro_id,
            )
        )
        audit_service.log_event(action="bootstrap_admin", resource_type="usuario", resource_id=str(user.id))
        return user

    async def _validate(self, merged: Dict[str, Any], *, current: Optional[User]) -> None:
        errors: List[FieldError] = []
        role = UserRole(merged["role"])
        centro_id = merged.get("centro_id")
        if role in CENTER_BOUND_ROLES and centro_id is None:
            errors.append(FieldError(field="centro_id", message=f"Required for role {role.value}"))
        if current is None or centro_id != current.centro_id:
            await check_reference(errors, self._centers, "centro_id", centro_id)
        if current is not None and current.role == UserRole.DOCTOR and role != UserRole.DOCTOR:
            if await self._doctors.get_by_usuario_id(current.id) is not None:
                errors.append(FieldError(field="role", message="User is linked to a doctor record"))
        if errors:
            raise ValidationError(errors)

        username = merged["username"]
        if current is None or username != current.username:
            if await self._users.get_by_username(username) is not None:
                raise ConflictError("Username already exists")

        correo = str(merged["correo"])
        if current is None or correo.lower() != current.correo.lower():
            if await self._users.get_by_correo(correo) is not None:
                raise ConflictError("Email already registered")

    # Credential checks used by the gateway

    async def validate_credentials(self, username: str, password: str) -> UserIdentity:
        user = await self._users.get_by_username(username)
        if user is None:
            self._hasher.dummy_verify()
            logger.info("Login rejected: unknown username")
            raise InvalidCredentialsError()

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Login rejected: bad password for user id %s", user.id)
            raise InvalidCredentialsError()

        return await self.identity_for(user)

    async def find_identity_by_email(self, correo: str) -> UserIdentity:
        user = await self._users.get_by_correo(correo)
        if user is None:
            raise NotFoundError("No user with this email")
        return await self.identity_for(user)

    async def identity_for(self, user: User) -> UserIdentity:
        doctor_id: Optional[int] = None
        if user.role == UserRole.DOCTOR:
            doctor = await self._doctors.get_by_usuario_id(user.id)
            if doctor is not None:
                doctor_id = doctor.id
            else:
                logger.warning("User %s has role medico but no linked doctor record", user.id)
        return UserIdentity(
            id=user.id,
            username=user.username,
            role=user.role,
            centro_id=user.centro_id,
            doctor_id=doctor_id,
        )
