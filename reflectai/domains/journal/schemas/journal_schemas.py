"""Journal request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_DATE_ALIASES = AliasChoices("date", "entry_date")


class JournalEntryCreate(BaseModel):
    content: str
    title: Optional[str] = Field(default=None, max_length=255)
    moods: List[str] = Field(default_factory=list, max_length=20)
    entry_date: Optional[Union[datetime, date]] = Field(default=None, validation_alias=_DATE_ALIASES)


class JournalEntryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    moods: Optional[List[str]] = Field(default=None, max_length=20)
    ai_response: Optional[str] = None
    is_favorite: Optional[bool] = None
    entry_date: Optional[Union[datetime, date]] = Field(default=None, validation_alias=_DATE_ALIASES)


class JournalEntryListFilter(BaseModel):
    favorites: bool = False
    search: Optional[str] = Field(default=None, max_length=200)
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=50, ge=1, le=200)


class ResolveQuery(BaseModel):
    today: Optional[date] = None


class JournalEntryResponse(BaseModel):
    id: int
    title: Optional[str]
    content: str
    entry_date: str
    entry_day: date
    moods: List[str]
    ai_response: Optional[str]
    is_favorite: bool
    created_at: str
    updated_at: str


class JournalStatsResponse(BaseModel):
    """Serialised with camelCase keys: entriesCount, currentStreak, longestStreak, topMoods."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    entries_count: int
    current_streak: int
    longest_streak: int
    top_moods: Dict[str, int]
