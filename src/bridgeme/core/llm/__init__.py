"""LLM backend: provider adapters behind a two-operation interface."""

from .backend import (  # noqa: F401
    ChatBackend,
    GenerationUnavailableError,
    MissingCredentialError,
    content_text,
)
from .deps import build_chat_backend, get_chat_backend  # noqa: F401
