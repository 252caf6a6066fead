from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.hospital.api.deps import get_user_service
from src.hospital.domain.models.user import InitialAdminRequest, UserPublic
from src.hospital.services.users.service import UserService

router = APIRouter(prefix="/setup", tags=["setup"])


@router.post("/admin", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def create_initial_admin(
    payload: InitialAdminRequest,
    service: UserService = Depends(get_user_service),
) -> UserPublic:
    """Create the first administrator.

    Needs no token, and answers 409 as soon as any admin exists.
    """

    return await service.create_initial_admin(payload)
