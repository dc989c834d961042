"""Test doubles and small helpers shared by the test modules."""

import json
from collections.abc import AsyncGenerator, Sequence
from pathlib import Path

from langchain_core.messages import BaseMessage

NEGATIVE_REPLY = json.dumps(
    {"mood": "negative", "confidence": 0.9, "rationale": "stress cue"}
)
POSITIVE_REPLY = json.dumps(
    {"mood": "positive", "confidence": 0.8, "rationale": "excited"}
)


class FakeChatBackend:
    """Stands in for ``ChatBackend`` and records every call it receives.

    ``fail_at`` makes ``generate`` raise before yielding the fragment at
    that index.
    """

    def __init__(
        self,
        classify_reply: str = NEGATIVE_REPLY,
        fragments: Sequence[str] = ("I hear you.", " That sounds hard."),
        classify_error: Exception | None = None,
        fail_at: int | None = None,
    ) -> None:
        self.classify_reply = classify_reply
        self.fragments = list(fragments)
        self.classify_error = classify_error
        self.fail_at = fail_at
        self.classify_calls: list[tuple[str, list[BaseMessage]]] = []
        self.generate_calls: list[tuple[str, list[BaseMessage]]] = []

    async def classify(
        self, system_prompt: str, messages: Sequence[BaseMessage]
    ) -> str:
        self.classify_calls.append((system_prompt, list(messages)))
        if self.classify_error is not None:
            raise self.classify_error
        return self.classify_reply

    async def generate(
        self, system_prompt: str, messages: Sequence[BaseMessage]
    ) -> AsyncGenerator[str, None]:
        self.generate_calls.append((system_prompt, list(messages)))
        for index, fragment in enumerate(self.fragments):
            if index == self.fail_at:
                raise RuntimeError("upstream connection reset")
            yield fragment


def parse_sse(body: str) -> list[dict]:
    """Split an SSE body into its decoded ``data:`` payloads."""
    events = []
    for block in body.split("\n\n"):
        block = block.strip()
        if block.startswith("data: "):
            events.append(json.loads(block[len("data: ") :]))
    return events


def read_conversations(path: Path) -> dict:
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8")).get("conversations", {})


def write_conversations(path: Path, conversations: dict) -> None:
    path.write_text(json.dumps({"conversations": conversations}), encoding="utf-8")
