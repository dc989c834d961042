"""Root logger setup with conversation-scoped context.

Every record carries ``conversation_id`` (bound per request by the chat
endpoint) plus the active OTEL ``trace_id``/``span_id`` when tracing is
on, so one conversation can be followed across classification,
streaming and history writes.

``json_output=True`` emits one JSON object per line; otherwise records
are rendered with uvicorn's coloured formatter for local development.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

from opentelemetry import trace

from bridgeme.configs.system import LoggingConfig

conversation_id_var: ContextVar[str] = ContextVar("conversation_id", default="")

_CONTEXT_FIELDS = ("conversation_id", "trace_id", "span_id")

# Provider SDKs and HTTP clients log every request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "langchain_core")
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s [%(conversation_id)s] %(message)s"
_DEV_DATEFMT = "%H:%M:%S"


def bind_conversation_id(conversation_id: str | None) -> None:
    """Tag log records emitted from the current request context."""
    conversation_id_var.set(conversation_id or "")


class _ConversationContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.conversation_id = conversation_id_var.get()  # type: ignore[attr-defined]
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            record.trace_id = format(span_context.trace_id, "032x")  # type: ignore[attr-defined]
            record.span_id = format(span_context.span_id, "016x")  # type: ignore[attr-defined]
        else:
            record.trace_id = ""  # type: ignore[attr-defined]
            record.span_id = ""  # type: ignore[attr-defined]
        return True


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s "
            + " ".join(f"%({field})s" for field in _CONTEXT_FIELDS),
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            defaults={field: "" for field in _CONTEXT_FIELDS},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install one stdout handler on the root and uvicorn loggers."""
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_ConversationContextFilter())
    handler.setFormatter(_build_formatter(config.json_output))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
