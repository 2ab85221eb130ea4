"""Pydantic request/response models for game endpoints.

Field names follow the mobile client's ``GameSession`` and ``Word`` types.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# --- Words ---


class WordResponse(BaseModel):
    id: int
    word: str
    meaning_ta: str
    meaning_en: str | None = None
    domain: str | None = None
    period: str | None = None
    modern_equivalent: str | None = None
    status: str | None = None
    notes: str | None = None
    difficulty: str
    approved: bool


class RandomWordsResponse(BaseModel):
    difficulty: str
    count: int
    words: list[WordResponse]


# --- Sessions ---


class SessionCreateRequest(BaseModel):
    """Tallies of a finished game. Range checks happen in the service layer."""

    game_type: str
    score: int
    max_score: int
    questions_answered: int
    correct_answers: int
    duration_seconds: int
    difficulty_level: str = "medium"
    client_session_id: str | None = Field(None, max_length=64)


class SessionResponse(BaseModel):
    id: int
    user_id: int
    game_type: str
    score: int
    max_score: int
    questions_answered: int
    correct_answers: int
    duration_seconds: int
    difficulty_level: str
    completed_at: datetime
    client_session_id: str | None = None


class SessionSubmitResponse(BaseModel):
    session: SessionResponse
    duplicate: bool = False
    points: int | None = None
    level: int | None = None
    level_up: bool = False


class SessionHistoryResponse(BaseModel):
    sessions: list[SessionResponse]
    total: int


# --- Single answers ---


class AnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word_id: int = Field(..., alias="wordId")
    answer: str
    time_spent: int = Field(..., alias="timeSpent")


class AnswerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correct: bool
    points: int
    correct_answer: str | None = Field(None, alias="correctAnswer")
    level: int | None = None
    level_up: bool = False
