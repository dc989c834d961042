"""Mood classification and mode routing."""

from .classifier import (  # noqa: F401
    ClassificationError,
    MoodClassifier,
    parse_mood_reply,
)
from .models import (  # noqa: F401
    FALLBACK_MOOD_RESULT,
    FALLBACK_RATIONALE,
    MISSING_RATIONALE,
    Mode,
    Mood,
    MoodResult,
)
from .router import mode_for_mood, system_prompt_for_mode  # noqa: F401
