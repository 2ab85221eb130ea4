"""Game endpoints: word sampling, session submission, single answers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.auth.dependencies import get_current_user
from wordgame.config import get_settings
from wordgame.database import get_session
from wordgame.db.models import GameSession, User, Word
from wordgame.games.schemas import (
    AnswerRequest,
    AnswerResponse,
    RandomWordsResponse,
    SessionCreateRequest,
    SessionHistoryResponse,
    SessionResponse,
    SessionSubmitResponse,
    WordResponse,
)
from wordgame.games.session_service import (
    count_user_sessions,
    list_user_sessions,
    submit_answer,
    submit_game_session,
)
from wordgame.words.service import get_random_words

router = APIRouter(prefix="/api/games", tags=["Games"])


def word_response(word: Word) -> WordResponse:
    return WordResponse(
        id=word.id,
        word=word.word,
        meaning_ta=word.meaning_ta,
        meaning_en=word.meaning_en,
        domain=word.domain,
        period=word.period,
        modern_equivalent=word.modern_equivalent,
        status=word.status,
        notes=word.notes,
        difficulty=word.difficulty,
        approved=word.approved,
    )


def session_response(session: GameSession) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        user_id=session.user_id,
        game_type=session.game_type,
        score=session.score,
        max_score=session.max_score,
        questions_answered=session.questions_answered,
        correct_answers=session.correct_answers,
        duration_seconds=session.duration_seconds,
        difficulty_level=session.difficulty_level,
        completed_at=session.completed_at,
        client_session_id=session.client_session_id,
    )


@router.get("/words", response_model=RandomWordsResponse)
async def random_words(
    count: int | None = Query(None),
    difficulty: str = Query("easy"),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Random approved words for a new round."""
    if count is None:
        count = get_settings().random_words_default_count
    words = await get_random_words(db, count, difficulty)
    return RandomWordsResponse(
        difficulty=difficulty,
        count=len(words),
        words=[word_response(w) for w in words],
    )


@router.post("/sessions", response_model=SessionSubmitResponse, status_code=201)
async def create_session(
    body: SessionCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Record a finished game for the current user and credit its score."""
    submission = await submit_game_session(
        db,
        user_id=user.id,
        game_type=body.game_type,
        score=body.score,
        max_score=body.max_score,
        questions_answered=body.questions_answered,
        correct_answers=body.correct_answers,
        duration_seconds=body.duration_seconds,
        difficulty_level=body.difficulty_level,
        client_session_id=body.client_session_id,
    )
    update = submission.score_update
    return SessionSubmitResponse(
        session=session_response(submission.session),
        duplicate=submission.duplicate,
        points=update.points if update else None,
        level=update.level if update else None,
        level_up=bool(update and update.levels_gained),
    )


@router.get("/sessions", response_model=SessionHistoryResponse)
async def my_sessions(
    limit: int = Query(20),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Own game history, newest first."""
    sessions = await list_user_sessions(db, user.id, limit)
    return SessionHistoryResponse(
        sessions=[session_response(s) for s in sessions],
        total=await count_user_sessions(db, user.id),
    )


@router.post("/submit", response_model=AnswerResponse)
async def answer_word(
    body: AnswerRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Check a single translation answer."""
    result = await submit_answer(db, user.id, body.word_id, body.answer, body.time_spent)
    update = result.score_update
    return AnswerResponse(
        correct=result.correct,
        points=result.points,
        correct_answer=result.correct_answer,
        level=update.level if update else None,
        level_up=bool(update and update.levels_gained),
    )
