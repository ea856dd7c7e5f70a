"""Thin wrapper around the OpenAI chat-completions API.

Every failure (missing key, transport error, API error, empty completion) is
raised as ``UpstreamError`` so callers can fall back to canned text.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from flask import current_app
from openai import OpenAI, OpenAIError

from reflectai.core.errors import UpstreamError

logger = logging.getLogger(__name__)

Message = Dict[str, str]


def _api_key() -> str:
    key = current_app.config.get("OPENAI_API_KEY") or ""
    if len(key) < 10 or not key.startswith("sk-"):
        raise UpstreamError("ai_not_configured")
    return key


def _client() -> OpenAI:
    client = current_app.extensions.get("openai_client")
    if client is None:
        client = OpenAI(api_key=_api_key(), timeout=current_app.config.get("OPENAI_TIMEOUT", 20.0))
        current_app.extensions["openai_client"] = client
    return client


def chat_completion(
    messages: List[Message],
    *,
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
) -> str:
    """Return the assistant text for ``messages``."""
    _api_key()
    try:
        response = _client().chat.completions.create(
            model=current_app.config.get("OPENAI_MODEL", "gpt-4o"),
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens or current_app.config.get("OPENAI_MAX_TOKENS", 500),
        )
    except OpenAIError as exc:
        logger.warning("OpenAI request failed: %s", exc)
        raise UpstreamError("ai_request_failed") from exc
    content = (response.choices[0].message.content or "").strip() if response.choices else ""
    if not content:
        raise UpstreamError("ai_empty_response")
    return content
