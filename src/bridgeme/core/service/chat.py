"""Mood-routed chat service.

One request runs strictly in order: load history, classify the mood,
route to a mode and system prompt, open the reply stream, relay
fragments, then persist the finished turn.  ``prepare`` covers everything
up to an open stream so that failures there can still be reported as
plain HTTP errors; ``stream_response`` covers the rest.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from opentelemetry import trace

from bridgeme.configs.config import AppConfig
from bridgeme.core.llm import (
    ChatBackend,
    GenerationUnavailableError,
    MissingCredentialError,
)
from bridgeme.core.mood import MoodClassifier, mode_for_mood, system_prompt_for_mode
from bridgeme.infra.history import ChatMessageHistoryFactory
from bridgeme.infra.telemetry import ATTR_MODE

from .metrics import HISTORY_APPENDS_TOTAL, MODE_SELECTIONS_TOTAL
from .models import (
    STREAM_ERROR_MESSAGE,
    ChatContext,
    DoneEvent,
    ErrorEvent,
    MetaEvent,
    PreparedTurn,
    StreamEvent,
    TokenEvent,
)

logger = logging.getLogger(__name__)


def recent_messages(messages: Sequence[BaseMessage], limit: int) -> list[BaseMessage]:
    """Keep at most the *limit* most recent messages."""
    if limit <= 0:
        return []
    return list(messages[-limit:])


class MoodChatService:
    """Classifies each message, picks a response mode and streams the reply."""

    def __init__(
        self,
        backend: ChatBackend | None,
        config: AppConfig,
        history_factory: ChatMessageHistoryFactory,
    ) -> None:
        self._backend = backend
        self._credential_env_name = config.credential_env_name
        self._prompts = config.prompt
        self._max_history = config.chat.max_history_messages
        self._history_factory = history_factory

    async def build_context(
        self,
        message: str,
        conversation_id: str | None,
        request_history: Sequence[BaseMessage] = (),
    ) -> ChatContext:
        """Assemble the request context.

        Stored history wins over caller-supplied history; whichever is
        used is cut to the configured window.
        """
        stored: list[BaseMessage] = []
        if conversation_id:
            stored = await self._history_factory(conversation_id, None).aget_messages()
        history = stored if stored else list(request_history)
        return ChatContext(
            message=message,
            conversation_id=conversation_id,
            history=recent_messages(history, self._max_history),
        )

    async def prepare(self, ctx: ChatContext) -> PreparedTurn:
        """Classify, route, and open the reply stream.

        Raises:
            MissingCredentialError: no backend is configured.
            GenerationUnavailableError: the reply stream failed before
                producing its first fragment.
        """
        if self._backend is None:
            raise MissingCredentialError(self._credential_env_name)

        classifier = MoodClassifier(self._backend, self._prompts.classifier)
        mood = await classifier.detect(ctx.message, ctx.history)
        mode = mode_for_mood(mood.mood)
        MODE_SELECTIONS_TOTAL.labels(mode=mode.value).inc()
        trace.get_current_span().set_attribute(ATTR_MODE, mode.value)
        logger.info(
            "Routed message to %s mode (mood=%s, confidence=%.2f)",
            mode.value,
            mood.mood.value,
            mood.confidence,
        )

        fragments = self._backend.generate(
            system_prompt_for_mode(mode, self._prompts),
            [*ctx.history, HumanMessage(content=ctx.message)],
        )
        try:
            first_fragment: str | None = await anext(fragments)
        except StopAsyncIteration:
            first_fragment = None
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Chat generation failed to start", exc_info=True)
            raise GenerationUnavailableError("Failed to generate response.") from e

        return PreparedTurn(
            ctx=ctx,
            mood=mood,
            mode=mode,
            fragments=fragments,
            first_fragment=first_fragment,
        )

    async def stream_response(
        self, turn: PreparedTurn
    ) -> AsyncGenerator[StreamEvent, None]:
        """Yield meta, token and done/error events for a prepared turn.

        The turn is persisted exactly once when the stream ends, with
        whatever assistant text was produced, even after an error or a
        client disconnect.
        """
        yield MetaEvent(
            mood=turn.mood.mood,
            mode=turn.mode,
            confidence=turn.mood.confidence,
            rationale=turn.mood.rationale,
        )

        parts: list[str] = []
        try:
            if turn.first_fragment is not None:
                parts.append(turn.first_fragment)
                yield TokenEvent(content=turn.first_fragment)
                async for fragment in turn.fragments:
                    parts.append(fragment)
                    yield TokenEvent(content=fragment)
            yield DoneEvent()
        except asyncio.CancelledError:
            logger.info("Client went away mid-stream; keeping partial reply.")
            raise
        except Exception:
            logger.warning("Stream error", exc_info=True)
            yield ErrorEvent(message=STREAM_ERROR_MESSAGE)
        finally:
            try:
                await turn.fragments.aclose()
            finally:
                # Shielded so a cancelled request still records its turn.
                await asyncio.shield(
                    self._persist_turn(turn.ctx, "".join(parts))
                )

    async def _persist_turn(self, ctx: ChatContext, assistant_text: str) -> None:
        if not ctx.conversation_id:
            return
        history = self._history_factory(ctx.conversation_id, None)
        try:
            await history.aadd_messages(
                [HumanMessage(content=ctx.message), AIMessage(content=assistant_text)]
            )
        except Exception:
            HISTORY_APPENDS_TOTAL.labels(status="error").inc()
            logger.warning(
                "Failed to record turn for conversation %s",
                ctx.conversation_id,
                exc_info=True,
            )
        else:
            HISTORY_APPENDS_TOTAL.labels(status="ok").inc()
