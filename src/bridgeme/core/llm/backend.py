"""ChatBackend: the two LLM operations the chat pipeline needs.

Wraps a pair of LangChain chat models (one pinned to deterministic
output for classification, one streaming for replies) so the rest of
the pipeline never touches provider SDKs.  Provider differences are
confined to the factories in ``deps.py``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Sequence
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, SystemMessage

logger = logging.getLogger(__name__)

_BLOCK_TYPE_TEXT = "text"


class MissingCredentialError(Exception):
    """The active provider's API credential is not configured."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} is not set")
        self.env_name = env_name


class GenerationUnavailableError(Exception):
    """The reply stream could not be established."""


def content_text(content: Any) -> str:
    """Flatten message content to plain text.

    Providers return either a string or a list of content blocks
    (``{"type": "text", "text": ...}``); non-text blocks are dropped.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == _BLOCK_TYPE_TEXT:
                parts.append(block.get("text") or "")
        return "".join(parts)
    return ""


class ChatBackend:
    """Classification + streaming generation over LangChain chat models."""

    def __init__(
        self,
        *,
        classifier_llm: BaseChatModel,
        chat_llm: BaseChatModel,
        provider: str,
    ) -> None:
        self._classifier_llm = classifier_llm
        self._chat_llm = chat_llm
        self.provider = provider

    async def classify(
        self, system_prompt: str, messages: Sequence[BaseMessage]
    ) -> str:
        """Run one non-streaming call and return the reply text."""
        reply = await self._classifier_llm.ainvoke(
            [SystemMessage(content=system_prompt), *messages]
        )
        return content_text(reply.content)

    async def generate(
        self, system_prompt: str, messages: Sequence[BaseMessage]
    ) -> AsyncGenerator[str, None]:
        """Stream reply text fragments as the provider produces them."""
        async for chunk in self._chat_llm.astream(
            [SystemMessage(content=system_prompt), *messages]
        ):
            text = content_text(chunk.content)
            if text:
                yield text
