"""Response formatter for displaying chat events by type."""

import logging
from typing import TextIO

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """Formats and displays one streamed reply."""

    def __init__(self, output: TextIO):
        self.output = output
        self.content_buffer: list[str] = []
        self.meta: dict | None = None
        self.error: str | None = None

    @property
    def reply(self) -> str:
        """Assistant text received so far."""
        return "".join(self.content_buffer)

    def handle_event(self, event: dict) -> None:
        """Handle a single event and display it appropriately."""
        event_type = event.get("type")

        if event_type == "meta":
            self.meta = event
            self._print(f"{format_badge(event)}\n")

        elif event_type == "token":
            content = event.get("content", "")
            self.content_buffer.append(content)
            self._print(content)

        elif event_type == "done":
            pass

        elif event_type == "error":
            self.error = event.get("message", "Unknown error")
            self._print(f"\n❌ Error: {self.error}\n")

        else:
            logger.debug("Unknown event type: %s, event: %s", event_type, event)

    def finish_response(self) -> None:
        """Finish displaying a response."""
        if self.content_buffer:
            self._print("\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()


def format_badge(meta: dict) -> str:
    """One-line mode/mood badge, e.g. ``[Supportive] negative (90%) - stress cue``."""
    confidence = meta.get("confidence") or 0
    return (
        f"[{meta.get('mode', '?')}] {meta.get('mood', '?')} "
        f"({round(confidence * 100)}%) - {meta.get('rationale', '')}"
    )
