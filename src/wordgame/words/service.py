"""Word store: random sampling for games plus admin management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from wordgame.config import get_settings
from wordgame.db.models import Word
from wordgame.errors import Conflict, InvalidInput, NotFound
from wordgame.games.scoring import MAX_STORED_INT, validate_difficulty

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

# Classical Tamil measures shipped as the starter vocabulary
SAMPLE_WORDS: list[dict] = [
    {
        "word": "படி",
        "meaning_ta": "அளவுக் குடுவை (கோரையால்/மரத்தால்)",
        "meaning_en": "Padi: dry/volume measure",
        "domain": "Volume",
        "period": "Classical/Medieval",
        "modern_equivalent": "லிட்டர்",
        "status": "traditional",
        "notes": "2 உறி = 1 படி",
        "difficulty": "easy",
    },
    {
        "word": "குறணி",
        "meaning_ta": "அளவுக் கருவி",
        "meaning_en": "Small measure unit",
        "domain": "Volume",
        "period": "Classical",
        "modern_equivalent": "மில்லிலிட்டர்",
        "status": "extinct",
        "notes": "குறிய அளவு",
        "difficulty": "medium",
    },
    {
        "word": "நாழிகை",
        "meaning_ta": "காலஅளவு",
        "meaning_en": "Time measurement unit",
        "domain": "Time",
        "period": "Ancient",
        "modern_equivalent": "நிமிடம்",
        "status": "extinct",
        "notes": "24 நிமிடங்கள்",
        "difficulty": "easy",
    },
]


async def get_random_words(db: AsyncSession, count: int, difficulty: str) -> list[Word]:
    """Uniform sample, without replacement, of approved words at a difficulty.

    Returns every matching word when fewer than ``count`` exist.

    Raises:
        InvalidInput: Count outside [1, random_words_max_count] or unknown difficulty.
    """
    if count <= 0:
        msg = "count must be a positive integer"
        raise InvalidInput(msg)
    max_count = get_settings().random_words_max_count
    if count > max_count:
        msg = f"count must not exceed {max_count}"
        raise InvalidInput(msg)
    validate_difficulty(difficulty)

    result = await db.execute(
        select(Word)
        .where(Word.approved.is_(True), Word.difficulty == difficulty)
        .order_by(func.random())
        .limit(count)
    )
    return list(result.scalars())


async def get_word(db: AsyncSession, word_id: int) -> Word:
    word = await db.get(Word, word_id) if 0 < word_id <= MAX_STORED_INT else None
    if word is None:
        msg = f"Word {word_id} not found"
        raise NotFound(msg)
    return word


async def list_words(db: AsyncSession, approved: bool | None = None) -> list[Word]:
    stmt = select(Word).order_by(Word.created_at.desc(), Word.id.desc())
    if approved is not None:
        stmt = stmt.where(Word.approved.is_(approved))
    result = await db.execute(stmt)
    return list(result.scalars())


async def create_word(
    db: AsyncSession,
    word: str,
    meaning_ta: str,
    meaning_en: str | None = None,
    domain: str | None = None,
    period: str | None = None,
    modern_equivalent: str | None = None,
    status: str | None = None,
    notes: str | None = None,
    difficulty: str = "easy",
    approved: bool = False,
    created_by: int | None = None,
) -> Word:
    """Add a vocabulary entry.

    Raises:
        InvalidInput: Empty word text or unknown difficulty.
        Conflict: The word text already exists.
    """
    text = word.strip()
    if not text:
        msg = "word must not be empty"
        raise InvalidInput(msg)
    validate_difficulty(difficulty)

    existing = await db.execute(select(Word.id).where(Word.word == text))
    if existing.scalar_one_or_none() is not None:
        msg = f"Word '{text}' already exists"
        raise Conflict(msg)

    entry = Word(
        word=text,
        meaning_ta=meaning_ta,
        meaning_en=meaning_en,
        domain=domain,
        period=period,
        modern_equivalent=modern_equivalent,
        status=status,
        notes=notes,
        difficulty=difficulty,
        approved=approved,
        created_by=created_by,
    )
    db.add(entry)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = f"Word '{text}' already exists"
        raise Conflict(msg) from e

    logger.info("word_created", word_id=entry.id, approved=approved, created_by=created_by)
    return entry


async def set_word_approval(db: AsyncSession, word_id: int, approved: bool) -> Word:
    word = await get_word(db, word_id)
    word.approved = approved
    await db.flush()
    logger.info("word_approval_changed", word_id=word_id, approved=approved)
    return word


async def seed_sample_words(db: AsyncSession) -> int:
    """Insert the sample words that are missing. Idempotent. Returns rows added."""
    result = await db.execute(select(Word.word))
    present = set(result.scalars())

    added = 0
    for data in SAMPLE_WORDS:
        if data["word"] in present:
            continue
        db.add(Word(approved=True, **data))
        added += 1

    await db.commit()
    if added:
        logger.info("sample_words_seeded", count=added)
    return added
