"""Flat JSON document store for per-conversation message logs.

Document layout::

    {"conversations": {"<conversation id>": [{"role": ..., "content": ...}, ...]}}

Every ``append`` rewrites the whole document.  All read-modify-write
cycles go through one ``asyncio.Lock`` so concurrent appends (to the
same or different conversations) never drop each other's entries.
Writes land in a temp file first and are moved into place with
``os.replace``, so readers never see a half-written document.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bridgeme.infra.telemetry import (
    ATTR_HISTORY_CONVERSATION_ID,
    ATTR_HISTORY_MESSAGE_COUNT,
    SPAN_HISTORY_APPEND,
    SPAN_HISTORY_LOAD,
    tracer,
)

from .models import HistoryMessage

logger = logging.getLogger(__name__)

DEFAULT_ROOT_KEY = "conversations"
_ENCODING = "utf-8"


class JsonHistoryStore:
    """Append-only conversation log backed by a single JSON file."""

    def __init__(self, path: Path, root_key: str = DEFAULT_ROOT_KEY) -> None:
        self.path = Path(path)
        self.root_key = root_key
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load(self, conversation_id: str | None) -> list[HistoryMessage]:
        """Return the stored messages for *conversation_id*, oldest-first.

        Missing ids, a missing document and unreadable documents all
        yield an empty list.
        """
        if not conversation_id:
            return []
        with tracer.start_as_current_span(SPAN_HISTORY_LOAD) as span:
            span.set_attribute(ATTR_HISTORY_CONVERSATION_ID, conversation_id)
            try:
                document = await asyncio.to_thread(self._read_document)
            except Exception:
                logger.warning(
                    "Failed to load conversation history for %s",
                    conversation_id,
                    exc_info=True,
                )
                return []
            messages = self._parse_entries(
                self._conversations(document).get(conversation_id),
                conversation_id,
            )
            span.set_attribute(ATTR_HISTORY_MESSAGE_COUNT, len(messages))
            return messages

    async def append(
        self,
        conversation_id: str | None,
        entries: Sequence[HistoryMessage],
    ) -> None:
        """Append *entries* after the stored messages of *conversation_id*.

        No-op for an empty id or no entries.  Prior entries are written
        back untouched.  I/O errors and a corrupt document propagate to
        the caller; the corrupt document is left as is.
        """
        if not conversation_id or not entries:
            return
        with tracer.start_as_current_span(SPAN_HISTORY_APPEND) as span:
            span.set_attribute(ATTR_HISTORY_CONVERSATION_ID, conversation_id)
            async with self._write_lock:
                document = await asyncio.to_thread(self._read_document)
                conversations = document.setdefault(self.root_key, {})
                if not isinstance(conversations, dict):
                    raise ValueError(
                        f"{self.path}: {self.root_key!r} is not a mapping"
                    )
                existing = conversations.get(conversation_id)
                if not isinstance(existing, list):
                    existing = []
                conversations[conversation_id] = existing + [
                    entry.model_dump() for entry in entries
                ]
                await asyncio.to_thread(self._write_document, document)
            span.set_attribute(
                ATTR_HISTORY_MESSAGE_COUNT, len(conversations[conversation_id])
            )
        logger.debug(
            "Appended %d message(s) to conversation %s",
            len(entries),
            conversation_id,
        )

    async def clear(self, conversation_id: str) -> None:
        """Remove every stored message of *conversation_id*."""
        async with self._write_lock:
            document = await asyncio.to_thread(self._read_document)
            conversations = self._conversations(document)
            if conversations.pop(conversation_id, None) is not None:
                await asyncio.to_thread(self._write_document, document)

    # ------------------------------------------------------------------
    # File access (runs in a worker thread)
    # ------------------------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        """Read the whole document; a missing file is an empty document."""
        try:
            with open(self.path, encoding=_ENCODING) as f:
                document = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(document, dict):
            raise ValueError(f"{self.path}: top-level JSON value is not an object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=_ENCODING) as f:
                json.dump(document, f, ensure_ascii=False, indent=4)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _conversations(self, document: dict[str, Any]) -> dict[str, Any]:
        conversations = document.get(self.root_key)
        return conversations if isinstance(conversations, dict) else {}

    @staticmethod
    def _parse_entries(raw: Any, conversation_id: str) -> list[HistoryMessage]:
        if not isinstance(raw, list):
            return []
        messages: list[HistoryMessage] = []
        for item in raw:
            try:
                messages.append(HistoryMessage.model_validate(item))
            except ValidationError:
                logger.warning(
                    "Skipping malformed history entry in conversation %s",
                    conversation_id,
                )
        return messages
