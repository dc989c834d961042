"""Conversion between stored ``{role, content}`` records and LangChain messages."""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from .models import ROLE_ASSISTANT, ROLE_USER, HistoryMessage


def record_to_message(record: HistoryMessage) -> BaseMessage:
    if record.role == ROLE_USER:
        return HumanMessage(content=record.content)
    return AIMessage(content=record.content)


def message_to_record(message: BaseMessage) -> HistoryMessage:
    """Convert a human/AI message to a storable record.

    Raises ``ValueError`` for any other message type (system, tool, ...),
    which never belong in conversation history.
    """
    if isinstance(message, HumanMessage):
        role = ROLE_USER
    elif isinstance(message, AIMessage):
        role = ROLE_ASSISTANT
    else:
        raise ValueError(f"Cannot store {message.type!r} message in history")
    content = message.content if isinstance(message.content, str) else ""
    return HistoryMessage(role=role, content=content)
