"""LangChain ``BaseChatMessageHistory`` view over ``JsonHistoryStore``.

Scoped to one conversation id.  Used by the chat service to load the
recent turns and to record each finished turn.
"""

from collections.abc import Sequence

from langchain_core.chat_history import BaseChatMessageHistory
from langchain_core.messages import BaseMessage

from .converters import message_to_record, record_to_message
from .store import JsonHistoryStore


class JsonChatMessageHistory(BaseChatMessageHistory):
    """JSON-file-backed chat message history (LangChain compatible).

    ``max_messages`` limits the read window to the most recent messages
    when set.  Writes are appended as one batch so a turn's user and
    assistant messages always land together.
    """

    def __init__(
        self,
        store: JsonHistoryStore,
        conversation_id: str,
        max_messages: int | None = None,
    ) -> None:
        super().__init__()
        self._store = store
        self.conversation_id = conversation_id
        self._max_messages = max_messages

    async def aget_messages(self) -> list[BaseMessage]:
        """Load stored messages for this conversation, oldest-first."""
        records = await self._store.load(self.conversation_id)
        if self._max_messages:
            records = records[-self._max_messages :]
        return [record_to_message(r) for r in records]

    async def aadd_messages(self, messages: Sequence[BaseMessage]) -> None:
        await self._store.append(
            self.conversation_id, [message_to_record(m) for m in messages]
        )

    def clear(self) -> None:
        """Sync clear is not supported; use aclear() instead."""
        raise NotImplementedError("Use aclear() for async history clearing")

    async def aclear(self) -> None:
        await self._store.clear(self.conversation_id)
