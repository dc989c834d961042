"""Chat context: per-request data passed to the chat service."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

from langchain_core.messages import BaseMessage

from bridgeme.core.mood import Mode, MoodResult


@dataclass
class ChatContext:
    """Per-request input: the new message plus history for the models."""

    message: str
    conversation_id: str | None = None
    history: list[BaseMessage] = field(default_factory=list)


@dataclass
class PreparedTurn:
    """A turn that is classified and has an open reply stream.

    ``first_fragment`` was already pulled from ``fragments`` while
    establishing the stream; it is ``None`` when the stream ended
    without producing text.
    """

    ctx: ChatContext
    mood: MoodResult
    mode: Mode
    fragments: AsyncGenerator[str, None]
    first_fragment: str | None = None
