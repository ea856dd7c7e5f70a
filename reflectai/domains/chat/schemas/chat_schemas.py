"""Chatbot request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, StrictStr, field_validator

from reflectai.core.ai.prompts import CUSTOM_PREFIX, PERSONALITIES, SUPPORT_TYPES


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: StrictStr


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(min_length=1, max_length=100)
    support_type: Optional[str] = "general"
    personality_type: Optional[str] = "default"
    custom_instructions: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("support_type")
    @classmethod
    def _support_or_general(cls, value: Optional[str]) -> str:
        return value if value in SUPPORT_TYPES else "general"

    @field_validator("personality_type")
    @classmethod
    def _personality_or_default(cls, value: Optional[str]) -> str:
        if value in PERSONALITIES or (value or "").startswith(CUSTOM_PREFIX):
            return value
        return "default"


class ChatReply(BaseModel):
    role: str = "assistant"
    content: str
    remaining: int
    fallback: bool = False


class UsageResponse(BaseModel):
    can_send: bool
    remaining: int
