"""Authentication router: /api/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.auth.dependencies import get_current_user
from wordgame.auth.jwt import create_access_token
from wordgame.auth.password import PasswordStrengthError
from wordgame.auth.schemas import AuthResponse, LoginRequest, SignupRequest, UserResponse
from wordgame.auth.service import authenticate_user, register_user
from wordgame.config import get_settings
from wordgame.database import get_session
from wordgame.db.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def user_response(user: User) -> UserResponse:
    """Build a UserResponse from a User model."""
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        avatar_url=user.avatar_url,
        points=user.points,
        level=user.level,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _auth_response(user: User) -> AuthResponse:
    settings = get_settings()
    return AuthResponse(
        token=create_access_token(user.id, user.email, user.role),
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=user_response(user),
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    body: SignupRequest,
    db: AsyncSession = Depends(get_session),
) -> AuthResponse:
    """Create a student or teacher account and log it in."""
    try:
        user = await register_user(db, body.email, body.password, body.full_name, body.role)
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> AuthResponse:
    """Exchange email + password for an access token."""
    user = await authenticate_user(db, body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    logger.info("user_logged_in", user_id=user.id)
    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    """Current account."""
    return user_response(user)
