"""Canned replies used when the AI provider is unavailable."""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Sequence

STOP_WORDS = frozenset(
    (
        "what", "when", "where", "which", "that", "this", "with", "would", "could",
        "should", "have", "from", "your", "about", "just", "and", "the", "for", "but",
    )
)

EMOTION_CUES = (
    (("tired", "exhausted", "fatigue", "weary", "sleepy", "sleep"),
     "It sounds like you might be feeling tired or drained. "),
    (("anxious", "worry", "stress", "overwhelm", "nervous", "hard", "difficult"),
     "I sense some anxiety or stress in your entry. "),
    (("sad", "down", "depress", "unhappy", "blue", "miserable"),
     "There seems to be a tone of sadness in your writing. "),
    (("happy", "joy", "excit", "glad", "great", "good", "positive"),
     "There's a positive energy in your entry today. "),
)

REFLECTION_TEMPLATES = (
    "{prefix}{tone}Thank you for taking the time to journal today. Reflecting on your thoughts "
    "this way builds self-awareness. What might help you with the situations you've described?",
    "{prefix}{tone}I appreciate you sharing your experiences. Writing about your day is a powerful "
    "way to process emotions. Is there one part of this you'd like to explore further?",
    "{prefix}{tone}Your entry shows thoughtful self-reflection. Recording your thoughts creates space "
    "between experience and reaction. What would be a small step toward what you wrote about?",
    "{prefix}{tone}This kind of reflection builds perspective and resilience. What resources or "
    "support might help you navigate what you've described?",
    "{prefix}{tone}Your journal is a record of your inner experience. Looking at what you wrote, "
    "what patterns do you notice, and what might they say about your needs right now?",
)

CHAT_TEMPLATES: Dict[str, Sequence[str]] = {
    "default": (
        "{prefix}thank you for sharing that. What feels most important to you about it right now?",
        "{prefix}I'm here with you. What would help you feel a little more supported today?",
    ),
    "socratic": (
        "{prefix}what are you truly seeking here? Which premise led you to this thought?",
        "{prefix}before I answer, what do you yourself believe about this?",
    ),
    "stoic": (
        "{prefix}remember that we control our responses, not events. What part of this is yours to act on?",
        "{prefix}consider what would remain if you let go of what is outside your control.",
    ),
    "existentialist": (
        "{prefix}you are free to choose how you meet this. What meaning do you want it to have?",
    ),
    "analytical": (
        "{prefix}let's break this down. What are the two or three factors that matter most?",
    ),
    "poetic": (
        "{prefix}even a heavy sky carries light somewhere. Where do you notice a little light today?",
    ),
    "humorous": (
        "{prefix}life clearly didn't read the manual either. What's one small win we can celebrate?",
    ),
    "zen": (
        "{prefix}breathe, and notice this moment as it is. What do you observe right now?",
    ),
    "custom": (
        "{prefix}I appreciate your perspective. Following your custom personality, which part of this "
        "would you like to examine more deeply?",
    ),
}

CHECKIN_FOLLOW_UP = (
    "Thank you for sharing your thoughts. Your reflection on this topic shows thoughtful "
    "engagement with the question."
)


def extract_keywords(text: str, stop_words: Iterable[str] = STOP_WORDS) -> List[str]:
    stops = set(stop_words)
    words = (w.strip(".,!?;:\"'()") for w in (text or "").lower().split())
    return [w for w in words if len(w) > 3 and w not in stops]


def _pick_keywords(keywords: List[str]) -> List[str]:
    if len(keywords) > 3:
        return [keywords[0], keywords[len(keywords) // 2]]
    return keywords[:1]


def emotional_tone(text: str) -> str:
    lowered = (text or "").lower()
    for cues, sentence in EMOTION_CUES:
        if any(cue in lowered for cue in cues):
            return sentence
    return ""


def reflection_fallback(
    content: str,
    exclude: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Reflection built from the entry's keywords and tone; never equals ``exclude``."""
    rng = rng or random.Random()
    selected = _pick_keywords(extract_keywords(content))
    prefix = f"I notice you mentioned {' and '.join(selected)}. " if selected else ""
    tone = emotional_tone(content)
    options = [t.format(prefix=prefix, tone=tone) for t in REFLECTION_TEMPLATES]
    candidates = [o for o in options if o != exclude] or options
    return rng.choice(candidates)


def chat_fallback(
    last_user_message: str,
    personality_type: str,
    rng: Optional[random.Random] = None,
) -> str:
    rng = rng or random.Random()
    selected = _pick_keywords(extract_keywords(last_user_message))
    prefix = f"Regarding your thoughts on {' and '.join(selected)}, " if selected else ""
    key = "custom" if personality_type.startswith("custom_") else personality_type
    templates = CHAT_TEMPLATES.get(key, CHAT_TEMPLATES["default"])
    reply = rng.choice(list(templates)).format(prefix=prefix)
    return reply[0].upper() + reply[1:]
