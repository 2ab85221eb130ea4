"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database built from the ORM
metadata, so nothing leaks between tests and no server is needed.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

os.environ["WG_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WG_SEED_SAMPLE_WORDS"] = "false"
os.environ["WG_LOG_FORMAT"] = "console"
os.environ["WG_LOG_LEVEL"] = "WARNING"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from wordgame.config import get_settings  # noqa: E402

get_settings.cache_clear()

from wordgame.auth.jwt import create_access_token  # noqa: E402
from wordgame.auth.password import hash_password  # noqa: E402
from wordgame.database import close_db, create_all, get_session_factory, init_db  # noqa: E402
from wordgame.db.models import GameSession, User, Word  # noqa: E402
from wordgame.main import create_app  # noqa: E402

TEST_PASSWORD = "Vilaiyattu2024"
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema per test. Disposing the engine drops the in-memory database."""
    await init_db(get_settings().database_url)
    await create_all()
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app. The database fixture stands in for the lifespan."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


async def make_user(
    db: AsyncSession,
    email: str,
    full_name: str | None = None,
    role: str = "student",
    points: int = 0,
    level: int = 1,
    level_progress: int = 0,
    created_at: datetime | None = None,
) -> User:
    """Insert a user directly, bypassing signup."""
    now = created_at or datetime.now(timezone.utc)
    user = User(
        email=email,
        password_hash=_TEST_PASSWORD_HASH,
        full_name=full_name or email.split("@")[0].title(),
        role=role,
        points=points,
        level=level,
        level_progress=level_progress,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.commit()
    return user


async def make_session(
    db: AsyncSession,
    user_id: int,
    score: int = 10,
    completed_at: datetime | None = None,
    game_type: str = "mcq",
) -> GameSession:
    """Insert a finished session row without touching the user's totals."""
    session = GameSession(
        user_id=user_id,
        game_type=game_type,
        score=score,
        max_score=max(score, 10),
        questions_answered=1,
        correct_answers=1 if score else 0,
        duration_seconds=30,
        difficulty_level="easy",
        completed_at=completed_at or datetime.now(timezone.utc),
    )
    db.add(session)
    await db.commit()
    return session


async def make_word(
    db: AsyncSession,
    word: str,
    meaning_en: str = "meaning",
    difficulty: str = "easy",
    approved: bool = True,
) -> Word:
    entry = Word(
        word=word,
        meaning_ta=f"{word} பொருள்",
        meaning_en=meaning_en,
        difficulty=difficulty,
        approved=approved,
    )
    db.add(entry)
    await db.commit()
    return entry


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


# ---------------------------------------------------------------------------
# Authenticated users
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def student(db_session: AsyncSession) -> User:
    return await make_user(db_session, "kavya@example.com", full_name="Kavya")


@pytest_asyncio.fixture
async def teacher(db_session: AsyncSession) -> User:
    return await make_user(db_session, "arasi@example.com", full_name="Arasi", role="teacher")


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, student: User) -> AsyncClient:
    """Client authenticated as a student."""
    client.headers.update(auth_headers(student))
    return client
