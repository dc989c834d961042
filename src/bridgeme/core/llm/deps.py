"""Provider adapters and FastAPI dependency factories for the backend."""

import logging
from collections.abc import Callable

from fastapi import Request
from langchain_core.language_models import BaseChatModel

from bridgeme.configs.config import AppConfig
from bridgeme.configs.system import LLMConfig

from .backend import ChatBackend

logger = logging.getLogger(__name__)

OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
ANTHROPIC_DEFAULT_CLASSIFIER_MODEL = "claude-3-haiku-20240307"
ANTHROPIC_DEFAULT_CHAT_MODEL = "claude-sonnet-4-5-20250929"

ModelPair = tuple[BaseChatModel, BaseChatModel]


def _build_openai(config: LLMConfig, api_key: str) -> ModelPair:
    from langchain_openai import ChatOpenAI

    common = {
        "api_key": api_key,
        "timeout": config.model_timeout.total_seconds(),
        "max_retries": config.max_retries,
    }
    if config.endpoint:
        common["base_url"] = config.endpoint

    classifier = ChatOpenAI(
        model=config.classifier_model or OPENAI_DEFAULT_MODEL,
        temperature=0,
        max_tokens=config.classifier_max_tokens,
        **common,
    )
    chat = ChatOpenAI(
        model=config.chat_model or OPENAI_DEFAULT_MODEL,
        temperature=config.chat_temperature,
        max_tokens=config.chat_max_tokens,
        streaming=True,
        **common,
    )
    return classifier, chat


def _build_anthropic(config: LLMConfig, api_key: str) -> ModelPair:
    from langchain_anthropic import ChatAnthropic

    common = {
        "api_key": api_key,
        "timeout": config.model_timeout.total_seconds(),
        "max_retries": config.max_retries,
    }
    if config.endpoint:
        common["base_url"] = config.endpoint

    classifier = ChatAnthropic(
        model=config.classifier_model or ANTHROPIC_DEFAULT_CLASSIFIER_MODEL,
        temperature=0,
        max_tokens=config.classifier_max_tokens,
        **common,
    )
    chat = ChatAnthropic(
        model=config.chat_model or ANTHROPIC_DEFAULT_CHAT_MODEL,
        temperature=config.chat_temperature,
        max_tokens=config.chat_max_tokens,
        streaming=True,
        **common,
    )
    return classifier, chat


_known_providers: dict[str, Callable[[LLMConfig, str], ModelPair]] = {
    "openai": _build_openai,
    "anthropic": _build_anthropic,
}


def build_chat_backend(config: AppConfig) -> ChatBackend | None:
    """Create the process-wide backend, or ``None`` without a credential.

    A missing credential is not fatal at startup; each chat request
    reports it as a server error instead.
    """
    provider = config.llm.provider
    if provider not in _known_providers:
        raise NotImplementedError(f"Provider {provider} is not implemented.")

    api_key = config.provider_api_key()
    if not api_key:
        logger.warning(
            "%s is not set; chat requests will fail until it is configured.",
            config.credential_env_name,
        )
        return None

    classifier_llm, chat_llm = _known_providers[provider](config.llm, api_key)
    logger.info(
        "LLM backend ready (provider=%s, classifier=%s, chat=%s)",
        provider,
        getattr(classifier_llm, "model_name", None)
        or getattr(classifier_llm, "model", None),
        getattr(chat_llm, "model_name", None) or getattr(chat_llm, "model", None),
    )
    return ChatBackend(
        classifier_llm=classifier_llm, chat_llm=chat_llm, provider=provider
    )


def get_chat_backend(request: Request) -> ChatBackend | None:
    """FastAPI dependency, reads the backend from ``app.state``.

    ``None`` means the credential was unset at startup.
    """
    return getattr(request.app.state, "chat_backend", None)
