"""ORM models for the users, words and game_sessions tables.

The schema is created by Alembic (``alembic/versions``). Tests build it
straight from this metadata.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wordgame.db.base import Base

ROLES = ("student", "teacher", "admin")
GAME_TYPES = ("match", "mcq", "jumbled", "hints")
DIFFICULTIES = ("easy", "medium", "hard")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table.

    ``points``, ``level`` and ``level_progress`` are only ever changed through
    the single atomic UPDATE in ``games.session_service.apply_score_to_user``.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        CheckConstraint("level >= 1", name="ck_users_level_positive"),
        CheckConstraint("role IN ('student', 'teacher', 'admin')", name="ck_users_role"),
        Index("idx_users_role", "role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    full_name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="student")
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    level_progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    sessions: Mapped[list[GameSession]] = relationship("GameSession", back_populates="user")


# Leaderboard order
Index("idx_users_points_created", User.points.desc(), User.created_at, User.id)


# ---------------------------------------------------------------------------
# Words
# ---------------------------------------------------------------------------


class Word(Base):
    """Maps to the 'words' table. Read-only to the scoring core."""

    __tablename__ = "words"
    __table_args__ = (
        CheckConstraint("difficulty IN ('easy', 'medium', 'hard')", name="ck_words_difficulty"),
        Index("idx_words_approved_difficulty", "approved", "difficulty"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    meaning_ta: Mapped[str] = mapped_column(Text, nullable=False)
    meaning_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    domain: Mapped[str | None] = mapped_column(String(64), nullable=True)
    period: Mapped[str | None] = mapped_column(String(64), nullable=True)
    modern_equivalent: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False, default="easy", server_default="easy")
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    created_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


# ---------------------------------------------------------------------------
# Game sessions (immutable once written)
# ---------------------------------------------------------------------------


class GameSession(Base):
    """Maps to the 'game_sessions' table."""

    __tablename__ = "game_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "client_session_id", name="uq_game_sessions_user_client_id"),
        CheckConstraint("score >= 0", name="ck_game_sessions_score"),
        CheckConstraint(
            "correct_answers >= 0 AND correct_answers <= questions_answered",
            name="ck_game_sessions_answers",
        ),
        CheckConstraint("game_type IN ('match', 'mcq', 'jumbled', 'hints')", name="ck_game_sessions_game_type"),
        Index("idx_game_sessions_user_id", "user_id"),
        Index("idx_game_sessions_completed_at", "completed_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    game_type: Mapped[str] = mapped_column(String(16), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False)
    questions_answered: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty_level: Mapped[str] = mapped_column(String(16), nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    client_session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="sessions")
