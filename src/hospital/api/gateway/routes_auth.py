from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.hospital.api.deps import get_auth_service
from src.hospital.domain.models.claims import SessionClaims
from src.hospital.domain.models.user import UserIdentity, UserRole
from src.hospital.security import authenticate_token
from src.hospital.services.auth.service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class GoogleLoginRequest(BaseModel):
    # Google ID token as returned to the browser by Google Identity Services.
    credential: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserIdentity


class ValidateResponse(BaseModel):
    valid: bool = True
    id: int
    username: str
    role: UserRole
    centro_id: Optional[int] = None
    doctor_id: Optional[int] = None
    expires_at: datetime


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)) -> LoginResponse:
    issued, identity = await service.login(payload.username, payload.password)
    return LoginResponse(token=issued.token, token_type=issued.token_type, expires_at=issued.expires_at, user=identity)


@router.post("/google-login", response_model=LoginResponse)
async def google_login(
    payload: GoogleLoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    issued, identity = await service.google_login(payload.credential)
    return LoginResponse(token=issued.token, token_type=issued.token_type, expires_at=issued.expires_at, user=identity)


@router.get("/validate", response_model=ValidateResponse)
async def validate_token(claims: SessionClaims = Depends(authenticate_token)) -> ValidateResponse:
    """Return the claims of the bearer token, or 401."""
    return ValidateResponse(
        id=claims.user_id,
        username=claims.username,
        role=claims.role,
        centro_id=claims.centro_id,
        doctor_id=claims.doctor_id,
        expires_at=claims.expires_at,
    )
