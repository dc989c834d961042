"""Pydantic models for the chat API."""

import logging
from typing import TYPE_CHECKING

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from bridgeme.infra.history import HistoryMessage

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from bridgeme.core.service.models import StreamEvent


class ChatRequest(BaseModel):
    """Request model for the chat endpoint.

    ``message`` is optional at the schema level so that an empty or
    missing message is rejected with the endpoint's own 400 response.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = Field(default=None, description="New user message")
    history: list[HistoryMessage] = Field(
        default_factory=list,
        description="Caller-side history, used when nothing is stored",
    )
    conversation_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("conversationId", "conversation_id"),
        description="Client-generated conversation identifier",
    )

    @field_validator("history", mode="before")
    @classmethod
    def _keep_valid_history_entries(cls, value: object) -> list[HistoryMessage]:
        """Treat a non-list history as empty and drop malformed entries."""
        if not isinstance(value, list):
            return []
        entries: list[HistoryMessage] = []
        for item in value:
            try:
                entries.append(HistoryMessage.model_validate(item))
            except ValidationError:
                logger.debug("Dropping malformed caller history entry: %r", item)
        return entries

    @field_validator("message", "conversation_id")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class ErrorResponse(BaseModel):
    """Non-stream error body."""

    error: str = Field(description="Human-readable error message")


def format_sse(event: "StreamEvent") -> str:
    """Frame one event as a Server-Sent-Events ``data:`` line."""
    return f"data: {event.model_dump_json()}\n\n"
