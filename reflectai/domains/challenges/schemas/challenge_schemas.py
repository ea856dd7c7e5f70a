"""Challenge and badge request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProgressUpdate(BaseModel):
    progress: int = Field(ge=0)


class ChallengeResponse(BaseModel):
    id: int
    title: str
    description: str
    type: str
    target_value: int
    duration: int
    points: int
    badge_icon: str
    badge_color: str
    is_active: bool


class UserChallengeResponse(BaseModel):
    id: int
    challenge_id: int
    status: str
    current_progress: int
    started_at: Optional[str]
    completed_at: Optional[str]
    expires_at: Optional[str]
    challenge: ChallengeResponse


class BadgeResponse(BaseModel):
    id: int
    challenge_id: int
    earned_at: str
    points: int
    title: str
    badge_icon: str
    badge_color: str


class ChallengeStatsResponse(BaseModel):
    total_badges: int
    total_points: int
    active_challenges: int
    completed_challenges: int
