"""AI reflections for journal entries with a local fallback."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from reflectai.core.ai import client as ai_client
from reflectai.core.ai.fallbacks import reflection_fallback
from reflectai.core.ai.prompts import reflection_messages
from reflectai.core.errors import UpstreamError

logger = logging.getLogger(__name__)


def generate_reflection(content: str) -> str:
    """Ask the AI provider for a reflection; raises UpstreamError."""
    return ai_client.chat_completion(reflection_messages(content), temperature=0.7)


def reflect_or_fallback(content: str, previous: Optional[str] = None) -> Tuple[str, bool]:
    """Return (text, used_fallback). Never raises for provider failures."""
    try:
        return generate_reflection(content), False
    except UpstreamError as exc:
        logger.info("Using fallback reflection: %s", exc.message)
        return reflection_fallback(content, exclude=previous), True
