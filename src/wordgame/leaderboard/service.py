"""Leaderboard service: student ranking by points, optionally time-windowed.

The board is rebuilt from the users and game_sessions tables on every
call. Nothing is cached, so a read reflects whatever sessions were
committed when its query ran.

Ordering is ``points DESC, created_at ASC, id ASC``: equal points go to the
account that signed up first, then to the lower id. Ranks are strictly
positional (no shared ranks).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import and_, exists, func, or_, select

from wordgame.config import get_settings
from wordgame.db.models import GameSession, User
from wordgame.errors import InvalidInput

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

RANKED_ROLE = "student"

TIME_FILTER_WINDOWS: dict[str, timedelta | None] = {
    "all": None,
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}

WINDOW_BASES = ("activity", "signup")


def window_cutoff(time_filter: str, now: datetime | None = None) -> datetime | None:
    """Start of the rolling window for a filter, or None for all-time."""
    if time_filter not in TIME_FILTER_WINDOWS:
        msg = f"Unknown time filter '{time_filter}'. Expected one of: {', '.join(TIME_FILTER_WINDOWS)}"
        raise InvalidInput(msg)
    window = TIME_FILTER_WINDOWS[time_filter]
    if window is None:
        return None
    if now is None:
        now = datetime.now(timezone.utc)
    return now - window


async def get_leaderboard(
    db: AsyncSession,
    time_filter: str = "all",
    limit: int | None = None,
    now: datetime | None = None,
    window_basis: str | None = None,
) -> list[dict]:
    """Ranked top students.

    ``window_basis`` decides what "this week"/"this month" means:
    ``"activity"`` keeps students with a session completed inside the
    window, ``"signup"`` keeps students whose account was created inside
    it. ``games_played`` always counts every session of the user.

    Raises:
        InvalidInput: Limit outside [1, leaderboard_max_limit], unknown filter or basis.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.leaderboard_default_limit
    if limit <= 0:
        msg = "limit must be a positive integer"
        raise InvalidInput(msg)
    if limit > settings.leaderboard_max_limit:
        msg = f"limit must not exceed {settings.leaderboard_max_limit}"
        raise InvalidInput(msg)
    if window_basis is None:
        window_basis = settings.leaderboard_window_basis
    if window_basis not in WINDOW_BASES:
        msg = f"Unknown leaderboard window basis '{window_basis}'"
        raise InvalidInput(msg)

    cutoff = window_cutoff(time_filter, now)

    games_played = (
        select(func.count(GameSession.id))
        .where(GameSession.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    stmt = select(
        User.id,
        User.full_name,
        User.points,
        User.avatar_url,
        games_played.label("games_played"),
    ).where(User.role == RANKED_ROLE)

    if cutoff is not None:
        if window_basis == "signup":
            stmt = stmt.where(User.created_at >= cutoff)
        else:
            stmt = stmt.where(
                exists().where(
                    GameSession.user_id == User.id,
                    GameSession.completed_at >= cutoff,
                )
            )

    stmt = stmt.order_by(User.points.desc(), User.created_at.asc(), User.id.asc()).limit(limit)
    rows = (await db.execute(stmt)).all()

    logger.debug(
        "leaderboard_built",
        time_filter=time_filter,
        window_basis=window_basis,
        limit=limit,
        entries=len(rows),
    )
    return [
        {
            "id": str(row.id),
            "fullName": row.full_name,
            "points": row.points,
            "avatar_url": row.avatar_url,
            "games_played": int(row.games_played or 0),
            "rank": index + 1,
        }
        for index, row in enumerate(rows)
    ]


async def get_user_rank(db: AsyncSession, user: User) -> int | None:
    """1-based position of ``user`` on the all-time, unlimited board.

    Counts the students that sort strictly ahead under the board's order.
    Returns None for users that are not ranked (teachers and admins).
    """
    if user.role != RANKED_ROLE:
        return None

    ahead = await db.execute(
        select(func.count(User.id)).where(
            User.role == RANKED_ROLE,
            or_(
                User.points > user.points,
                and_(User.points == user.points, User.created_at < user.created_at),
                and_(
                    User.points == user.points,
                    User.created_at == user.created_at,
                    User.id < user.id,
                ),
            ),
        )
    )
    return int(ahead.scalar_one()) + 1
