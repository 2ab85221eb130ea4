"""Initial schema: users, words and game_sessions.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the three tables used by the game."""
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("full_name", sa.String(128), nullable=False),
        sa.Column("role", sa.String(16), server_default="student", nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("level", sa.Integer(), server_default="1", nullable=False),
        sa.Column("level_progress", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        sa.CheckConstraint("level >= 1", name="ck_users_level_positive"),
        sa.CheckConstraint("role IN ('student', 'teacher', 'admin')", name="ck_users_role"),
    )
    op.create_index("idx_users_role", "users", ["role"])
    # Leaderboard order
    op.create_index("idx_users_points_created", "users", [sa.text("points DESC"), "created_at", "id"])

    # --- words ---
    op.create_table(
        "words",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("word", sa.String(128), nullable=False, unique=True),
        sa.Column("meaning_ta", sa.Text(), nullable=False),
        sa.Column("meaning_en", sa.Text(), nullable=True),
        sa.Column("domain", sa.String(64), nullable=True),
        sa.Column("period", sa.String(64), nullable=True),
        sa.Column("modern_equivalent", sa.String(128), nullable=True),
        sa.Column("status", sa.String(32), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(16), server_default="easy", nullable=False),
        sa.Column("approved", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("difficulty IN ('easy', 'medium', 'hard')", name="ck_words_difficulty"),
    )
    op.create_index("idx_words_approved_difficulty", "words", ["approved", "difficulty"])

    # --- game_sessions ---
    op.create_table(
        "game_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("game_type", sa.String(16), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("max_score", sa.Integer(), nullable=False),
        sa.Column("questions_answered", sa.Integer(), nullable=False),
        sa.Column("correct_answers", sa.Integer(), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("difficulty_level", sa.String(16), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("client_session_id", sa.String(64), nullable=True),
        sa.UniqueConstraint("user_id", "client_session_id", name="uq_game_sessions_user_client_id"),
        sa.CheckConstraint("score >= 0", name="ck_game_sessions_score"),
        sa.CheckConstraint(
            "correct_answers >= 0 AND correct_answers <= questions_answered",
            name="ck_game_sessions_answers",
        ),
        sa.CheckConstraint("game_type IN ('match', 'mcq', 'jumbled', 'hints')", name="ck_game_sessions_game_type"),
    )
    op.create_index("idx_game_sessions_user_id", "game_sessions", ["user_id"])
    op.create_index("idx_game_sessions_completed_at", "game_sessions", ["completed_at"])


def downgrade() -> None:
    """Drop all game tables."""
    op.drop_index("idx_game_sessions_completed_at", table_name="game_sessions")
    op.drop_index("idx_game_sessions_user_id", table_name="game_sessions")
    op.drop_table("game_sessions")
    op.drop_index("idx_words_approved_difficulty", table_name="words")
    op.drop_table("words")
    op.drop_index("idx_users_points_created", table_name="users")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_table("users")
