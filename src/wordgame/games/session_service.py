"""Game session persistence and atomic score application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from wordgame.config import get_settings
from wordgame.db.models import GameSession, User, Word
from wordgame.errors import InvalidInput, NotFound, Unavailable
from wordgame.games.scoring import (
    MAX_STORED_INT,
    answer_points,
    levels_gained,
    validate_difficulty,
    validate_game_type,
    validate_session_counts,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class ScoreUpdate:
    """User state right after an atomic score update."""

    points: int
    level: int
    level_progress: int
    levels_gained: int


@dataclass(frozen=True)
class SessionSubmission:
    session: GameSession
    score_update: ScoreUpdate | None
    duplicate: bool = False


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    points: int
    correct_answer: str | None
    score_update: ScoreUpdate | None


# ---------------------------------------------------------------------------
# Atomic user update
# ---------------------------------------------------------------------------


async def apply_score_to_user(
    db: AsyncSession,
    user_id: int,
    score: int,
    correct_answers: int = 0,
) -> ScoreUpdate:
    """Add ``score`` points and ``correct_answers`` level-progress steps in one UPDATE.

    The arithmetic runs inside the database so concurrent submissions for
    the same user cannot lose an increment. Does not commit.

    Raises:
        InvalidInput: If either delta is negative.
        NotFound: If the user does not exist.
    """
    if score < 0 or correct_answers < 0:
        msg = "Score and correct answer deltas must not be negative"
        raise InvalidInput(msg)

    threshold = get_settings().level_up_threshold
    stepped = User.level_progress + correct_answers
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(
            points=User.points + score,
            level=User.level + stepped // threshold,
            level_progress=stepped % threshold,
            updated_at=datetime.now(timezone.utc),
        )
        .returning(User.points, User.level, User.level_progress)
        .execution_options(synchronize_session=False)
    )
    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        msg = f"User {user_id} not found"
        raise NotFound(msg)

    gained = levels_gained(row.level_progress, correct_answers, threshold)
    if gained:
        logger.info(
            "level_up",
            user_id=user_id,
            old_level=row.level - gained,
            new_level=row.level,
        )
    return ScoreUpdate(
        points=row.points,
        level=row.level,
        level_progress=row.level_progress,
        levels_gained=gained,
    )


# ---------------------------------------------------------------------------
# Session submission
# ---------------------------------------------------------------------------


async def get_session_by_client_id(
    db: AsyncSession, user_id: int, client_session_id: str,
) -> GameSession | None:
    result = await db.execute(
        select(GameSession).where(
            GameSession.user_id == user_id,
            GameSession.client_session_id == client_session_id,
        )
    )
    return result.scalar_one_or_none()


async def submit_game_session(
    db: AsyncSession,
    user_id: int,
    game_type: str,
    score: int,
    max_score: int,
    questions_answered: int,
    correct_answers: int,
    duration_seconds: int,
    difficulty_level: str,
    client_session_id: str | None = None,
) -> SessionSubmission:
    """Persist a finished game and credit the user, all or nothing.

    A repeated ``client_session_id`` for the same user returns the session
    recorded the first time and grants nothing.

    Raises:
        InvalidInput: Negative, oversized or inconsistent tallies, unknown enums.
        NotFound: Unknown user.
        Unavailable: The store could not be reached.
    """
    validate_game_type(game_type)
    validate_difficulty(difficulty_level)
    validate_session_counts(score, max_score, questions_answered, correct_answers, duration_seconds)

    try:
        if client_session_id is not None:
            existing = await get_session_by_client_id(db, user_id, client_session_id)
            if existing is not None:
                logger.info("session_duplicate", user_id=user_id, session_id=existing.id)
                return SessionSubmission(session=existing, score_update=None, duplicate=True)

        score_update = await apply_score_to_user(db, user_id, score, correct_answers)

        session = GameSession(
            user_id=user_id,
            game_type=game_type,
            score=score,
            max_score=max_score,
            questions_answered=questions_answered,
            correct_answers=correct_answers,
            duration_seconds=duration_seconds,
            difficulty_level=difficulty_level,
            completed_at=datetime.now(timezone.utc),
            client_session_id=client_session_id,
        )
        db.add(session)
        await db.flush()
        await db.commit()
    except NotFound:
        await db.rollback()
        raise
    except IntegrityError:
        # Lost a race with a retry carrying the same client_session_id
        await db.rollback()
        if client_session_id is None:
            raise
        existing = await get_session_by_client_id(db, user_id, client_session_id)
        if existing is None:
            raise
        return SessionSubmission(session=existing, score_update=None, duplicate=True)
    except (OperationalError, InterfaceError) as e:
        await db.rollback()
        msg = "Session store unavailable"
        raise Unavailable(msg) from e

    logger.info(
        "session_recorded",
        user_id=user_id,
        session_id=session.id,
        game_type=game_type,
        score=score,
        points=score_update.points,
        level=score_update.level,
    )
    return SessionSubmission(session=session, score_update=score_update)


async def submit_answer(
    db: AsyncSession,
    user_id: int,
    word_id: int,
    answer: str,
    time_spent_ms: int,
) -> AnswerResult:
    """Check one answer against a word's English meaning and credit it.

    A correct answer earns ``answer_points(time_spent_ms)`` and one
    level-progress step, applied atomically. A wrong answer writes nothing.

    Raises:
        InvalidInput: Negative time.
        NotFound: Unknown word or user.
    """
    points = answer_points(time_spent_ms)

    word = await db.get(Word, word_id) if 0 < word_id <= MAX_STORED_INT else None
    if word is None:
        msg = f"Word {word_id} not found"
        raise NotFound(msg)

    expected = (word.meaning_en or "").strip().lower()
    is_correct = bool(expected) and expected == answer.strip().lower()
    if not is_correct:
        return AnswerResult(correct=False, points=0, correct_answer=None, score_update=None)

    try:
        score_update = await apply_score_to_user(db, user_id, points, correct_answers=1)
        await db.commit()
    except NotFound:
        await db.rollback()
        raise
    except (OperationalError, InterfaceError) as e:
        await db.rollback()
        msg = "User store unavailable"
        raise Unavailable(msg) from e

    return AnswerResult(
        correct=True,
        points=points,
        correct_answer=word.meaning_en,
        score_update=score_update,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_user_sessions(db: AsyncSession, user_id: int, limit: int = 20) -> list[GameSession]:
    """Most recent sessions first."""
    if limit <= 0:
        msg = "limit must be positive"
        raise InvalidInput(msg)
    max_limit = get_settings().session_history_max_limit
    if limit > max_limit:
        msg = f"limit must not exceed {max_limit}"
        raise InvalidInput(msg)
    result = await db.execute(
        select(GameSession)
        .where(GameSession.user_id == user_id)
        .order_by(GameSession.completed_at.desc(), GameSession.id.desc())
        .limit(limit)
    )
    return list(result.scalars())


async def count_user_sessions(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(GameSession.id)).where(GameSession.user_id == user_id)
    )
    return int(result.scalar_one())
