"""Mood and mode domain types."""

from enum import Enum

from pydantic import BaseModel, Field


class Mood(str, Enum):
    """Emotional valence of a user message."""

    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


class Mode(str, Enum):
    """Response style selected from the detected mood."""

    SUPPORTIVE = "Supportive"
    EXPLORATORY = "Exploratory"


MISSING_RATIONALE = "Model did not provide rationale."
FALLBACK_RATIONALE = "Fallback to Supportive due to detection error."


class MoodResult(BaseModel):
    """One classification judgment, produced fresh per request."""

    mood: Mood = Field(description="Detected mood")
    confidence: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Classifier confidence"
    )
    rationale: str = Field(
        default=MISSING_RATIONALE, description="Short reason for the judgment"
    )


# Any classifier failure lands here: negative routes to Supportive.
FALLBACK_MOOD_RESULT = MoodResult(
    mood=Mood.NEGATIVE,
    confidence=0.0,
    rationale=FALLBACK_RATIONALE,
)
