"""Domain stream events emitted by the chat service."""

from typing import Literal

from pydantic import BaseModel, Field

from bridgeme.core.mood import Mode, Mood


class MetaEvent(BaseModel):
    """Classification metadata; always the first event of a stream."""

    type: Literal["meta"] = "meta"
    mood: Mood = Field(description="Detected mood")
    mode: Mode = Field(description="Response mode routed from the mood")
    confidence: float = Field(description="Classifier confidence")
    rationale: str = Field(description="Classifier rationale")


class TokenEvent(BaseModel):
    """One generated text fragment, relayed as soon as it arrives."""

    type: Literal["token"] = "token"
    content: str = Field(description="Text fragment")


class DoneEvent(BaseModel):
    """Generation finished normally."""

    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    """Stream-level error event."""

    type: Literal["error"] = "error"
    message: str = Field(description="Error message")


StreamEvent = MetaEvent | TokenEvent | DoneEvent | ErrorEvent
