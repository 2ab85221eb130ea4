"""Word management endpoints for teachers and admins."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wordgame.auth.dependencies import require_role
from wordgame.database import get_session
from wordgame.db.models import User
from wordgame.games.router import word_response
from wordgame.games.schemas import WordResponse
from wordgame.words.schemas import WordApprovalRequest, WordCreateRequest
from wordgame.words.service import create_word, list_words, set_word_approval

router = APIRouter(prefix="/api/words", tags=["Words"])

_staff = require_role("teacher", "admin")


@router.get("", response_model=list[WordResponse])
async def all_words(
    approved: bool | None = Query(None),
    _user: User = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    """Every word, newest first, optionally filtered by approval."""
    return [word_response(w) for w in await list_words(db, approved)]


@router.post("", response_model=WordResponse, status_code=201)
async def add_word(
    body: WordCreateRequest,
    user: User = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    word = await create_word(db, created_by=user.id, **body.model_dump())
    await db.commit()
    return word_response(word)


@router.patch("/{word_id}", response_model=WordResponse)
async def update_approval(
    word_id: int,
    body: WordApprovalRequest,
    _user: User = Depends(_staff),
    db: AsyncSession = Depends(get_session),
):
    """Approve or hide a word."""
    word = await set_word_approval(db, word_id, body.approved)
    await db.commit()
    return word_response(word)
