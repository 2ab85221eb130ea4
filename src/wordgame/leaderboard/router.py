"""Leaderboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.auth.dependencies import require_role
from wordgame.config import get_settings
from wordgame.database import get_session
from wordgame.db.models import User
from wordgame.leaderboard.schemas import LeaderboardEntryResponse
from wordgame.leaderboard.service import get_leaderboard

router = APIRouter(prefix="/api", tags=["Leaderboard"])


@router.get("/games/leaderboard", response_model=list[LeaderboardEntryResponse])
async def leaderboard(
    time_filter: str = Query("all", alias="timeFilter"),
    limit: int | None = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """Top students by points. Public."""
    return await get_leaderboard(db, time_filter=time_filter, limit=limit)


@router.get("/admin/leaderboard", response_model=list[LeaderboardEntryResponse])
async def admin_leaderboard(
    time_filter: str = Query("all", alias="timeFilter"),
    limit: int | None = Query(None),
    _admin: User = Depends(require_role("admin", "teacher")),
    db: AsyncSession = Depends(get_session),
):
    """Same board with the larger admin default limit."""
    if limit is None:
        limit = get_settings().leaderboard_admin_limit
    return await get_leaderboard(db, time_filter=time_filter, limit=limit)
