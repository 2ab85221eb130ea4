"""Scoring engine: session tallies, per-answer points and level progression.

Everything here is pure. Persistence lives in ``session_service``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from wordgame.config import get_settings
from wordgame.db.models import DIFFICULTIES, GAME_TYPES
from wordgame.errors import InvalidInput

ANSWER_BASE_POINTS = 100
ANSWER_PENALTY_PER_SECOND = 5
ANSWER_MIN_POINTS = 10

# Largest value the Integer columns hold on Postgres
MAX_STORED_INT = 2_147_483_647


@dataclass(frozen=True)
class SessionResult:
    """Fields persisted for one finished game."""

    game_type: str
    score: int
    max_score: int
    questions_answered: int
    correct_answers: int
    duration_seconds: int
    difficulty_level: str

    def as_dict(self) -> dict:
        return asdict(self)


def validate_game_type(game_type: str) -> None:
    if game_type not in GAME_TYPES:
        msg = f"Unknown game type '{game_type}'. Expected one of: {', '.join(GAME_TYPES)}"
        raise InvalidInput(msg)


def validate_difficulty(difficulty: str) -> None:
    if difficulty not in DIFFICULTIES:
        msg = f"Unknown difficulty '{difficulty}'. Expected one of: {', '.join(DIFFICULTIES)}"
        raise InvalidInput(msg)


def validate_session_counts(
    score: int,
    max_score: int,
    questions_answered: int,
    correct_answers: int,
    duration_seconds: int,
) -> None:
    """Reject negative, oversized or inconsistent session tallies.

    Raises:
        InvalidInput: On the first violated rule.
    """
    for name, value in (
        ("score", score),
        ("max_score", max_score),
        ("questions_answered", questions_answered),
        ("correct_answers", correct_answers),
        ("duration_seconds", duration_seconds),
    ):
        if value < 0:
            msg = f"{name} must not be negative"
            raise InvalidInput(msg)
        if value > MAX_STORED_INT:
            msg = f"{name} must not exceed {MAX_STORED_INT}"
            raise InvalidInput(msg)
    if correct_answers > questions_answered:
        msg = "correct_answers cannot exceed questions_answered"
        raise InvalidInput(msg)
    if score > max_score:
        msg = "score cannot exceed max_score"
        raise InvalidInput(msg)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp. Aware ones pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def clamp_duration(started_at: datetime, finished_at: datetime, limit_seconds: int) -> int:
    """Elapsed whole seconds, bounded to [0, limit_seconds]. Naive times count as UTC."""
    started_at = as_utc(started_at)
    finished_at = as_utc(finished_at)
    elapsed = int((finished_at - started_at).total_seconds())
    return max(0, min(elapsed, limit_seconds))


def compute_session_result(
    game_type: str,
    answers: Sequence[bool],
    started_at: datetime,
    finished_at: datetime | None = None,
    difficulty_level: str = "medium",
) -> SessionResult:
    """Tally a finished round into the session fields.

    ``answers`` holds one ``wasCorrect`` flag per answered question.
    """
    validate_game_type(game_type)
    validate_difficulty(difficulty_level)

    settings = get_settings()
    if finished_at is None:
        finished_at = datetime.now(timezone.utc)

    questions_answered = len(answers)
    correct_answers = sum(1 for a in answers if a)
    per_answer = settings.points_per_correct_answer

    return SessionResult(
        game_type=game_type,
        score=correct_answers * per_answer,
        max_score=questions_answered * per_answer,
        questions_answered=questions_answered,
        correct_answers=correct_answers,
        duration_seconds=clamp_duration(started_at, finished_at, settings.session_time_limit_seconds),
        difficulty_level=difficulty_level,
    )


def answer_points(time_spent_ms: int) -> int:
    """Points for one correctly answered word: 100, minus 5 per whole second, floor 10."""
    if time_spent_ms < 0:
        msg = "time_spent_ms must not be negative"
        raise InvalidInput(msg)
    seconds = math.floor(time_spent_ms / 1000)
    return max(ANSWER_BASE_POINTS - seconds * ANSWER_PENALTY_PER_SECOND, ANSWER_MIN_POINTS)


# ---------------------------------------------------------------------------
# Level progression
# ---------------------------------------------------------------------------


def advance_level_progress(level: int, progress: int, correct: int, threshold: int) -> tuple[int, int]:
    """Apply ``correct`` steps of the level-progress counter.

    Each correct answer adds one to the counter; reaching ``threshold``
    bumps the level and resets the counter to zero.

    Returns:
        Tuple of (new_level, new_progress).
    """
    if threshold <= 0:
        msg = "threshold must be positive"
        raise InvalidInput(msg)
    if correct < 0:
        msg = "correct must not be negative"
        raise InvalidInput(msg)
    total = progress + correct
    return level + total // threshold, total % threshold


def levels_gained(progress_after: int, correct: int, threshold: int) -> int:
    """Level-ups produced by one update, recovered from the post-update counter.

    The pre-update counter was in ``[0, threshold)``, so exactly one ``g``
    satisfies ``0 <= progress_after + g * threshold - correct < threshold``.
    """
    return -((progress_after - correct) // threshold)
