"""Check-in request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from reflectai.domains.checkins.models import CHECKIN_TYPES, PRIORITIES


class CheckInCreate(BaseModel):
    type: str
    question: str = Field(min_length=1, max_length=2000)
    scheduled_date: Optional[datetime] = None
    priority: str = "normal"
    tags: List[str] = Field(default_factory=list, max_length=20)
    related_entry_id: Optional[int] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in CHECKIN_TYPES:
            raise ValueError(f"type must be one of {', '.join(CHECKIN_TYPES)}")
        return value

    @field_validator("priority")
    @classmethod
    def _known_priority(cls, value: str) -> str:
        if value not in PRIORITIES:
            raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
        return value


class CheckInRespond(BaseModel):
    response: str = Field(min_length=1, max_length=10000)


class CheckInResponse(BaseModel):
    id: int
    type: str
    question: str
    original_date: str
    scheduled_date: str
    is_answered: bool
    user_response: Optional[str]
    ai_follow_up: Optional[str]
    is_resolved: bool
    priority: str
    tags: List[str]
    related_entry_id: Optional[int]


class DailyStatusResponse(BaseModel):
    has_completed_today: bool
    last_check_in_date: Optional[str]
    can_create_new: bool
