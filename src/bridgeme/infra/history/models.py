"""Persisted history record shape."""

from typing import Literal

from pydantic import BaseModel, Field

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

Role = Literal["user", "assistant"]


class HistoryMessage(BaseModel):
    """One stored message: ``{"role": ..., "content": ...}``."""

    role: Role = Field(description="Message sender role")
    content: str = Field(description="Message content")
