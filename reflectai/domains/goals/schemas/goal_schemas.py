"""Goal and activity request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from reflectai.domains.goals.models import GOAL_STATUSES, GOAL_TYPES


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    type: str
    status: str = "not_started"
    target_date: Optional[date] = None
    target_minutes: Optional[int] = Field(default=None, gt=0)
    progress: float = Field(default=0.0, ge=0, le=100)
    parent_goal_id: Optional[int] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in GOAL_TYPES:
            raise ValueError(f"type must be one of {', '.join(GOAL_TYPES)}")
        return value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value not in GOAL_STATUSES:
            raise ValueError(f"status must be one of {', '.join(GOAL_STATUSES)}")
        return value


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    target_date: Optional[date] = None
    target_minutes: Optional[int] = Field(default=None, gt=0)
    progress: Optional[float] = None
    parent_goal_id: Optional[int] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in GOAL_TYPES:
            raise ValueError(f"type must be one of {', '.join(GOAL_TYPES)}")
        return value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in GOAL_STATUSES:
            raise ValueError(f"status must be one of {', '.join(GOAL_STATUSES)}")
        return value


class ActivityCreate(BaseModel):
    # Range checks live in the service so direct callers get the same errors.
    minutes_spent: int
    progress_increment: float = 0.0
    description: Optional[str] = None
    activity_date: Optional[date] = Field(default=None, validation_alias=AliasChoices("date", "activity_date"))


class ActivityUpdate(BaseModel):
    minutes_spent: Optional[int] = None
    progress_increment: Optional[float] = None
    description: Optional[str] = None
    activity_date: Optional[date] = Field(default=None, validation_alias=AliasChoices("date", "activity_date"))


class ActivityRangeQuery(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None


class GoalResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    type: str
    status: str
    target_date: Optional[date]
    completed_date: Optional[str]
    progress: float
    time_spent: int
    target_minutes: Optional[int]
    parent_goal_id: Optional[int]
    created_at: str
    updated_at: str


class ActivityResponse(BaseModel):
    id: int
    goal_id: int
    date: str
    minutes_spent: int
    progress_increment: float
    description: Optional[str]
    created_at: str


class GoalSummaryResponse(BaseModel):
    total: int
    completed: int
    in_progress: int
    time_spent: int
    by_type: Dict[str, int]


__all__ = [
    "GoalCreate",
    "GoalUpdate",
    "ActivityCreate",
    "ActivityUpdate",
    "ActivityRangeQuery",
    "GoalResponse",
    "ActivityResponse",
    "GoalSummaryResponse",
]
