"""Configuration management using pydantic-settings.

**Not a singleton**: each call to ``get_app_config()`` re-reads config
from disk so edits to the YAML files are picked up without restarting.

Priority order (highest first):

1. Init keyword arguments (tests build ``AppConfig(...)`` directly)
2. Environment variables (``BRIDGEME_`` prefix, ``__`` for nesting)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml``)
5. Prompt YAML (``configs/prompt.yml``)
6. File secrets, then field defaults

Provider credentials are the exception to the prefix rule: they are read
from the conventional ``OPENAI_API_KEY`` / ``ANTHROPIC_API_KEY`` names.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import (
    ChatConfig,
    HistoryConfig,
    LLMConfig,
    LoggingConfig,
    PromptConfig,
    ProviderName,
    TracingConfig,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
PROMPT_CONFIG_FILE = CONFIG_DIR / "prompt.yml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "BRIDGEME_"

DEFAULT_ENCODING = "utf-8"

# Env var name holding each provider's API credential.
PROVIDER_CREDENTIAL_ENV: dict[ProviderName, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

_PROMPT_KEYS = ("classifier", "supportive", "exploratory")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("openai_api_key", "OPENAI_API_KEY"),
        description="OpenAI API credential",
    )
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("anthropic_api_key", "ANTHROPIC_API_KEY"),
        description="Anthropic API credential",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig, description="LLM backend settings"
    )
    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Chat request settings"
    )
    history: HistoryConfig = Field(
        default_factory=HistoryConfig, description="History document settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging settings"
    )
    tracing: TracingConfig = Field(
        default_factory=TracingConfig, description="OpenTelemetry settings"
    )
    prompt: PromptConfig = Field(
        default_factory=PromptConfig, description="Prompt texts"
    )

    @property
    def credential_env_name(self) -> str:
        """Env var name the active provider reads its credential from."""
        return PROVIDER_CREDENTIAL_ENV[self.llm.provider]

    def provider_api_key(self) -> str | None:
        """Return the active provider's credential, or ``None`` when unset."""
        secret = (
            self.openai_api_key
            if self.llm.provider == "openai"
            else self.anthropic_api_key
        )
        if secret is None:
            return None
        return secret.get_secret_value() or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            _PromptYamlSettingsSource(settings_cls),
            file_secret_settings,
        )


class _PromptYamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads the prompt.yml file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        self.settings_cls = settings_cls

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not PROMPT_CONFIG_FILE.exists():
            return {}

        try:
            with open(PROMPT_CONFIG_FILE, encoding=DEFAULT_ENCODING) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            logger.warning("Failed to read %s", PROMPT_CONFIG_FILE, exc_info=True)
            return {}

        prompts = {k: data[k] for k in _PROMPT_KEYS if isinstance(data.get(k), str)}
        return {"prompt": prompts} if prompts else {}


def get_app_config() -> AppConfig:
    """Get the application configuration (fresh on every call)."""
    return AppConfig()
