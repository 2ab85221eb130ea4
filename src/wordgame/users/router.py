"""User endpoints: stats for the dashboard and the admin user list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.auth.dependencies import get_current_user, require_role
from wordgame.auth.router import user_response
from wordgame.auth.schemas import UserResponse
from wordgame.database import get_session
from wordgame.db.models import User
from wordgame.users.schemas import UserStatsResponse
from wordgame.users.service import get_user_stats, list_users

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def all_users(
    role: str | None = Query(None),
    _staff: User = Depends(require_role("teacher", "admin")),
    db: AsyncSession = Depends(get_session),
):
    """Accounts for the admin dashboard, oldest first."""
    return [user_response(u) for u in await list_users(db, role)]


@router.get("/me/stats", response_model=UserStatsResponse)
async def my_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Points, games played, day streak, rank and level of the current user."""
    return await get_user_stats(db, user.id)


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def user_stats(
    user_id: int,
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Same stats for any user."""
    return await get_user_stats(db, user_id)
