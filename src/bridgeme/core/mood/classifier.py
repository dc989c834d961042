"""Mood classifier: one deterministic LLM call, strict JSON parsing.

``MoodClassifier.classify`` raises ``ClassificationError`` for every kind
of failure (transport, empty reply, bad JSON, unknown mood).
``MoodClassifier.detect`` is what the pipeline calls: it never raises
and substitutes ``FALLBACK_MOOD_RESULT`` on failure.
"""

import asyncio
import json
import logging
import math
import time
from collections.abc import Sequence
from typing import Any

from langchain_core.messages import BaseMessage, HumanMessage

from bridgeme.core.llm import ChatBackend
from bridgeme.core.service.metrics import (
    MOOD_CLASSIFICATION_LATENCY_SECONDS,
    MOOD_CLASSIFICATIONS_TOTAL,
)
from bridgeme.infra.telemetry import (
    ATTR_MOOD,
    ATTR_MOOD_CONFIDENCE,
    ATTR_MOOD_FALLBACK,
    SPAN_MOOD_CLASSIFY,
    tracer,
)

from .models import FALLBACK_MOOD_RESULT, MISSING_RATIONALE, Mood, MoodResult

logger = logging.getLogger(__name__)

_KEY_MOOD = "mood"
_KEY_CONFIDENCE = "confidence"
_KEY_RATIONALE = "rationale"

_VALID_MOODS = frozenset(m.value for m in Mood)


class ClassificationError(Exception):
    """The classifier call or its reply could not produce a mood."""


def parse_mood_reply(text: str) -> MoodResult:
    """Parse the classifier's JSON reply.

    ``mood`` must be one of the three enumerated values.  A missing or
    non-numeric ``confidence`` becomes 0 and a missing ``rationale`` a
    placeholder; confidence outside [0, 1] is clamped.
    """
    if not text or not text.strip():
        raise ClassificationError("No text content from classifier")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ClassificationError(f"Classifier reply is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ClassificationError("Classifier reply is not a JSON object")

    mood = payload.get(_KEY_MOOD)
    if not isinstance(mood, str) or mood not in _VALID_MOODS:
        raise ClassificationError(f"Invalid mood value: {mood!r}")

    return MoodResult(
        mood=Mood(mood),
        confidence=_parse_confidence(payload.get(_KEY_CONFIDENCE)),
        rationale=_parse_rationale(payload.get(_KEY_RATIONALE)),
    )


def _parse_confidence(value: Any) -> float:
    """Unusable confidence values count as 0; the mood still stands."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0.0
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))


def _parse_rationale(value: Any) -> str:
    if value is None:
        return MISSING_RATIONALE
    return value if isinstance(value, str) else str(value)


class MoodClassifier:
    """Classifies the mood of a new message given recent history."""

    def __init__(self, backend: ChatBackend, system_prompt: str) -> None:
        self._backend = backend
        self._system_prompt = system_prompt

    async def classify(
        self, message: str, history: Sequence[BaseMessage]
    ) -> MoodResult:
        """Classify *message*; raise ``ClassificationError`` on any failure."""
        messages = [*history, HumanMessage(content=message)]
        start = time.monotonic()
        try:
            text = await self._backend.classify(self._system_prompt, messages)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ClassificationError(f"Classifier call failed: {e}") from e
        finally:
            MOOD_CLASSIFICATION_LATENCY_SECONDS.observe(time.monotonic() - start)
        return parse_mood_reply(text)

    async def detect(
        self, message: str, history: Sequence[BaseMessage]
    ) -> MoodResult:
        """Classify *message*, falling back to Supportive on failure."""
        with tracer.start_as_current_span(SPAN_MOOD_CLASSIFY) as span:
            try:
                result = await self.classify(message, history)
            except ClassificationError as e:
                logger.warning(
                    "Mood detection failed, defaulting to supportive: %s", e
                )
                result = FALLBACK_MOOD_RESULT
                outcome = "fallback"
            else:
                outcome = "ok"
            span.set_attribute(ATTR_MOOD, result.mood.value)
            span.set_attribute(ATTR_MOOD_CONFIDENCE, result.confidence)
            span.set_attribute(ATTR_MOOD_FALLBACK, outcome == "fallback")
            MOOD_CLASSIFICATIONS_TOTAL.labels(
                mood=result.mood.value, outcome=outcome
            ).inc()
            return result
