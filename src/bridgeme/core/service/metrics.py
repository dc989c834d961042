"""Prometheus metrics for the Bridge Me chat service.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``bridgeme_`` prefix.
"""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Chat session metrics
# ---------------------------------------------------------------------------

CHAT_SESSIONS_ACTIVE = Gauge(
    "bridgeme_chat_sessions_active",
    "Number of streaming chat sessions currently in progress",
)

CHAT_SESSIONS_TOTAL = Counter(
    "bridgeme_chat_sessions_total",
    "Total number of chat sessions by outcome",
    ["status"],  # "ok" | "error" | "cancelled"
)

CHAT_SESSION_DURATION_SECONDS = Histogram(
    "bridgeme_chat_session_duration_seconds",
    "End-to-end duration of a chat streaming session",
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120),
)

STREAM_EVENTS_TOTAL = Counter(
    "bridgeme_stream_events_total",
    "Total stream events emitted, by event type",
    ["event_type"],  # meta | token | done | error
)

# ---------------------------------------------------------------------------
# Mood pipeline metrics
# ---------------------------------------------------------------------------

MOOD_CLASSIFICATIONS_TOTAL = Counter(
    "bridgeme_mood_classifications_total",
    "Mood classifications by resulting mood and outcome",
    ["mood", "outcome"],  # outcome: "ok" | "fallback"
)

MOOD_CLASSIFICATION_LATENCY_SECONDS = Histogram(
    "bridgeme_mood_classification_latency_seconds",
    "Latency of the classifier call",
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10),
)

MODE_SELECTIONS_TOTAL = Counter(
    "bridgeme_mode_selections_total",
    "Routed response modes",
    ["mode"],  # "Supportive" | "Exploratory"
)

# ---------------------------------------------------------------------------
# History metrics
# ---------------------------------------------------------------------------

HISTORY_APPENDS_TOTAL = Counter(
    "bridgeme_history_appends_total",
    "History append attempts by outcome",
    ["status"],  # "ok" | "error"
)
