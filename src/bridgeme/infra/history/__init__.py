"""Conversation history persisted in a flat JSON document."""

from .chat_history import JsonChatMessageHistory
from .converters import message_to_record, record_to_message
from .deps import (
    ChatMessageHistoryFactory,
    build_history_store,
    get_chat_message_history_factory,
    get_history_store,
)
from .models import ROLE_ASSISTANT, ROLE_USER, HistoryMessage, Role
from .store import JsonHistoryStore

__all__ = [
    "build_history_store",
    "ChatMessageHistoryFactory",
    "get_chat_message_history_factory",
    "get_history_store",
    "HistoryMessage",
    "JsonChatMessageHistory",
    "JsonHistoryStore",
    "message_to_record",
    "record_to_message",
    "Role",
    "ROLE_ASSISTANT",
    "ROLE_USER",
]
