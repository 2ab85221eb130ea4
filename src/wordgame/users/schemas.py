"""Pydantic response models for user endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserStatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_points: int = Field(..., alias="totalPoints")
    games_played: int = Field(..., alias="gamesPlayed")
    current_streak: int = Field(..., alias="currentStreak")
    rank: int | None = None
    level: int
