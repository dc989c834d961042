"""FastAPI dependency factory for the chat service.

``get_chat_service`` is a per-request ``Depends`` factory with an
explicit parameter chain; the backend and the history store themselves
are process-wide and live on ``app.state``.
"""

from typing import Annotated

from fastapi import Depends

from bridgeme.configs.config import AppConfig, get_app_config
from bridgeme.core.llm import ChatBackend, get_chat_backend
from bridgeme.infra.history import (
    ChatMessageHistoryFactory,
    get_chat_message_history_factory,
)

from .chat import MoodChatService


def get_chat_service(
    backend: Annotated[ChatBackend | None, Depends(get_chat_backend)],
    config: Annotated[AppConfig, Depends(get_app_config)],
    history_factory: Annotated[
        ChatMessageHistoryFactory, Depends(get_chat_message_history_factory)
    ],
) -> MoodChatService:
    """Create a configured chat service per request."""
    return MoodChatService(backend, config, history_factory)
