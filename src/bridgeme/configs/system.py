from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

ProviderName = Literal["openai", "anthropic"]


class LLMConfig(BaseModel):
    """LLM backend configuration (classifier + chat models)."""

    provider: ProviderName = Field(
        default="openai", description="Which provider adapter to build"
    )
    endpoint: str | None = Field(
        default=None, description="Optional base URL for an API-compatible server"
    )
    classifier_model: str | None = Field(
        default=None,
        description="Model used for mood classification (provider default if unset)",
    )
    chat_model: str | None = Field(
        default=None,
        description="Model used for reply generation (provider default if unset)",
    )
    classifier_max_tokens: int = Field(
        default=120, description="Maximum tokens for the classification reply"
    )
    chat_max_tokens: int = Field(
        default=240, description="Maximum tokens in a single generated reply"
    )
    chat_temperature: float = Field(
        default=0.7, description="Sampling temperature for reply generation"
    )
    model_timeout: timedelta = Field(
        default=timedelta(seconds=60), description="Per-call timeout"
    )
    max_retries: int = Field(default=2, description="Client-side retry count")


class ChatConfig(BaseModel):
    """Configuration for chat settings."""

    max_history_messages: int = Field(
        default=8,
        description="Most recent history messages sent to classifier and generator",
    )


class HistoryConfig(BaseModel):
    """Flat JSON history document settings."""

    path: Path = Field(
        default=Path("data/chat-db.json"),
        description="Location of the JSON history document",
    )
    root_key: str = Field(
        default="conversations",
        description="Top-level key holding the conversation mapping",
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )


class TracingConfig(BaseModel):
    """OpenTelemetry OTLP export settings."""

    enabled: bool = Field(default=False, description="Enable OTLP span export")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    service_name: str = Field(default="bridgeme", description="OTEL service name")
    sample_rate: float = Field(default=1.0, description="Root sampling ratio")
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Paths excluded from HTTP instrumentation",
    )


class PromptConfig(BaseModel):
    """Prompt texts, loaded from ``configs/prompt.yml``."""

    classifier: str = Field(
        default=(
            "Classify the user's mood as negative, neutral, or positive. "
            'Reply ONLY with JSON: {"mood":"negative|neutral|positive",'
            '"confidence":0-1,"rationale":"short reason"}.'
        ),
        description="System instruction for the mood classifier",
    )
    supportive: str = Field(
        default="You are Bridge Me Chat in Supportive mode.",
        description="System prompt for Supportive replies",
    )
    exploratory: str = Field(
        default="You are Bridge Me Chat in Exploratory mode.",
        description="System prompt for Exploratory replies",
    )
