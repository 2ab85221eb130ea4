"""Request models for word management."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WordCreateRequest(BaseModel):
    word: str = Field(..., min_length=1, max_length=128)
    meaning_ta: str = Field(..., min_length=1)
    meaning_en: str | None = None
    domain: str | None = None
    period: str | None = None
    modern_equivalent: str | None = None
    status: str | None = None
    notes: str | None = None
    difficulty: str = "easy"
    approved: bool = True


class WordApprovalRequest(BaseModel):
    approved: bool
