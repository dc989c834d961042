"""Builders and per-request dependency factories for history storage.

``build_history_store`` runs once in the application lifespan; request
handlers read the store back from ``app.state``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request

from bridgeme.configs.config import AppConfig

from .chat_history import JsonChatMessageHistory
from .store import JsonHistoryStore

ChatMessageHistoryFactory = Callable[[str, int | None], JsonChatMessageHistory]


def build_history_store(config: AppConfig) -> JsonHistoryStore:
    return JsonHistoryStore(config.history.path, root_key=config.history.root_key)


def get_history_store(request: Request) -> JsonHistoryStore:
    """FastAPI dependency, reads the store from ``app.state``."""
    return request.app.state.history_store


def get_chat_message_history_factory(
    store: Annotated[JsonHistoryStore, Depends(get_history_store)],
) -> ChatMessageHistoryFactory:
    """Return a factory that creates JsonChatMessageHistory per conversation."""

    def factory(
        conversation_id: str, max_messages: int | None = None
    ) -> JsonChatMessageHistory:
        return JsonChatMessageHistory(
            store, conversation_id, max_messages=max_messages
        )

    return factory
