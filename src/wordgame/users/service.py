"""User stats and listing."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import select

from wordgame.db.models import ROLES, GameSession, User
from wordgame.errors import InvalidInput, NotFound
from wordgame.games.session_service import count_user_sessions
from wordgame.leaderboard.service import get_user_rank

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def compute_current_streak(play_days: Iterable[date], today: date) -> int:
    """Consecutive calendar days with play, ending today or yesterday.

    A streak that last saw play the day before yesterday is already broken.
    """
    days = set(play_days)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        msg = f"User {user_id} not found"
        raise NotFound(msg)
    return user


async def get_play_days(db: AsyncSession, user_id: int, since: datetime) -> list[date]:
    result = await db.execute(
        select(GameSession.completed_at).where(
            GameSession.user_id == user_id,
            GameSession.completed_at >= since,
        )
    )
    return [completed_at.date() for completed_at in result.scalars()]


async def get_user_stats(db: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    """Dashboard numbers for one user: points, games, day streak, rank, level.

    Raises:
        NotFound: Unknown user id.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    user = await get_user_or_404(db, user_id)
    games_played = await count_user_sessions(db, user_id)

    # Only sessions that could still belong to the current streak
    first_day = datetime.combine(now.date() - timedelta(days=games_played), datetime.min.time(), tzinfo=timezone.utc)
    play_days = await get_play_days(db, user_id, first_day)

    return {
        "totalPoints": user.points,
        "gamesPlayed": games_played,
        "currentStreak": compute_current_streak(play_days, now.date()),
        "rank": await get_user_rank(db, user),
        "level": user.level,
    }


async def list_users(db: AsyncSession, role: str | None = None) -> list[User]:
    stmt = select(User).order_by(User.created_at.asc(), User.id.asc())
    if role is not None:
        if role not in ROLES:
            msg = f"Unknown role '{role}'"
            raise InvalidInput(msg)
        stmt = stmt.where(User.role == role)
    result = await db.execute(stmt)
    return list(result.scalars())
