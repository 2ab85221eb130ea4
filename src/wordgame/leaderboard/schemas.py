"""Pydantic response models for leaderboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LeaderboardEntryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field(..., alias="fullName")
    points: int
    avatar_url: str | None = None
    games_played: int
    rank: int
