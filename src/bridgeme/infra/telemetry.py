"""OpenTelemetry bootstrap: tracing initialisation and span names.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing
is enabled via ``TracingConfig``.  When disabled the module is a
graceful no-op: ``tracer`` still hands out non-recording spans.

Usage::

    from bridgeme.infra.telemetry import SPAN_MOOD_CLASSIFY, tracer

    with tracer.start_as_current_span(SPAN_MOOD_CLASSIFY) as span:
        ...
"""

from __future__ import annotations

import logging

from opentelemetry import trace

from bridgeme.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("bridgeme")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_SSE_STREAM = "sse.stream"
SPAN_MOOD_CLASSIFY = "mood.classify"
SPAN_HISTORY_LOAD = "history.load"
SPAN_HISTORY_APPEND = "history.append"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_MOOD = "mood.value"
ATTR_MOOD_CONFIDENCE = "mood.confidence"
ATTR_MOOD_FALLBACK = "mood.fallback"
ATTR_MODE = "mood.mode"

ATTR_HISTORY_CONVERSATION_ID = "history.conversation_id"
ATTR_HISTORY_MESSAGE_COUNT = "history.message_count"

ATTR_SSE_OUTCOME = "sse.outcome"
ATTR_SSE_TOKEN_COUNT = "sse.token_count"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> None:
    """Initialise the OTEL ``TracerProvider`` and FastAPI instrumentation.

    No-op when ``settings`` is ``None`` or tracing is disabled.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return

    if not settings.endpoint:
        logger.warning(
            "Tracing enabled but no endpoint configured; "
            "skipping OpenTelemetry setup."
        )
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.endpoint))
    )
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls) if settings.excluded_urls else ""
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )
