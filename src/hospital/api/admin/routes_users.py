from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_user_service
from src.hospital.api.schemas import DeleteResponse
from src.hospital.domain.models.user import (
    CredentialsRequest,
    EmailLookupRequest,
    UserCreate,
    UserIdentity,
    UserPublic,
    UserUpdate,
)
from src.hospital.security import require_admin, require_internal_key
from src.hospital.services.users.service import UserService

router = APIRouter(prefix="/usuarios", tags=["usuarios"], dependencies=[Depends(require_admin)])

# Called by the gateway before a session exists, so no bearer token here.
internal_router = APIRouter(prefix="/usuarios", tags=["internal"], dependencies=[Depends(require_internal_key)])


@internal_router.post("/validate", response_model=UserIdentity)
async def validate_user(
    payload: CredentialsRequest,
    service: UserService = Depends(get_user_service),
) -> UserIdentity:
    """Check a username/password pair and return the identity to put in a token."""
    return await service.validate_credentials(payload.username, payload.password)


@internal_router.post("/by-email", response_model=UserIdentity)
async def find_user_by_email(
    payload: EmailLookupRequest,
    service: UserService = Depends(get_user_service),
) -> UserIdentity:
    return await service.find_identity_by_email(payload.correo)


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)) -> UserPublic:
    return await service.create(payload)


@router.get("", response_model=List[UserPublic])
async def list_users(service: UserService = Depends(get_user_service)) -> List[UserPublic]:
    return await service.list_all()


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)) -> UserPublic:
    return await service.get(user_id)


@router.put("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> UserPublic:
    return await service.update(user_id, payload)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)) -> DeleteResponse:
    await service.delete(user_id)
    return DeleteResponse(message="User deleted", id=user_id)
