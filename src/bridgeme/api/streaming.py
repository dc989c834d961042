"""SSE framing with an error boundary and session metrics.

Wraps an async generator of domain ``StreamEvent`` objects into
``data: {...}\\n\\n`` strings.  The chat service already turns upstream
failures into error events; anything that still escapes here is
reported the same way so the stream always ends with done or error.
"""

import asyncio
import json
import logging
import time
from collections import Counter as EventCounter
from collections.abc import AsyncGenerator

from bridgeme.core.service.metrics import (
    CHAT_SESSION_DURATION_SECONDS,
    CHAT_SESSIONS_ACTIVE,
    CHAT_SESSIONS_TOTAL,
    STREAM_EVENTS_TOTAL,
)
from bridgeme.core.service.models import (
    EVENT_TYPE_ERROR,
    STREAM_ERROR_MESSAGE,
    ErrorEvent,
    StreamEvent,
)
from bridgeme.infra.telemetry import (
    ATTR_SSE_OUTCOME,
    ATTR_SSE_TOKEN_COUNT,
    SPAN_SSE_STREAM,
    tracer,
)

from .models import format_sse

logger = logging.getLogger(__name__)


async def sse_stream(
    events: AsyncGenerator[StreamEvent, None],
) -> AsyncGenerator[str, None]:
    """Format domain events as SSE with error handling and metrics."""
    with tracer.start_as_current_span(SPAN_SSE_STREAM) as span:
        status = "ok"
        event_counts: EventCounter[str] = EventCounter()
        CHAT_SESSIONS_ACTIVE.inc()
        start = time.monotonic()
        try:
            async for event in events:
                event_counts[event.type] += 1
                STREAM_EVENTS_TOTAL.labels(event_type=event.type).inc()
                if event.type == EVENT_TYPE_ERROR:
                    status = "error"
                yield format_sse(event)
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        except Exception as e:
            status = "error"
            span.record_exception(e)
            logger.warning("Unexpected error in SSE stream", exc_info=True)
            STREAM_EVENTS_TOTAL.labels(event_type=EVENT_TYPE_ERROR).inc()
            yield format_sse(ErrorEvent(message=STREAM_ERROR_MESSAGE))
        finally:
            span.set_attribute(ATTR_SSE_OUTCOME, status)
            span.set_attribute(ATTR_SSE_TOKEN_COUNT, event_counts["token"])
            logger.debug("SSE stream finished: %s", json.dumps(event_counts))
            CHAT_SESSIONS_ACTIVE.dec()
            CHAT_SESSIONS_TOTAL.labels(status=status).inc()
            CHAT_SESSION_DURATION_SECONDS.observe(time.monotonic() - start)
