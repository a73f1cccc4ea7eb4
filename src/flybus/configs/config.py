"""Application settings, loaded with pydantic-settings.

``get_app_config()`` builds a fresh ``AppConfig`` on every call, so an
edited override file takes effect without a restart.  Sources, strongest
first:

1. override YAML named by ``FLYBUS_CONFIGMAP_FILE`` (e.g. a mounted ConfigMap)
2. ``FLYBUS_``-prefixed environment variables, ``__`` between nesting levels
3. ``.env`` at the project root
4. ``configs/config.yaml``, which also carries the knowledge corpus
5. field defaults
6. file secrets
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .knowledge import KnowledgeCorpus
from .system import (
    APIConfig,
    BroadcastConfig,
    LLMConfig,
    LoggingConfig,
    PromptConfig,
    SessionConfig,
    ThirdPartyConfig,
    TracingConfig,
)

PROJECT_ROOT = Path(__file__).resolve().parents[3]
STATIC_CONFIG_FILE = PROJECT_ROOT / "configs" / "config.yaml"
DOTENV_FILE = PROJECT_ROOT / ".env"

OVERRIDE_FILE_ENV = "FLYBUS_CONFIGMAP_FILE"


def _override_file() -> Path | None:
    value = os.environ.get(OVERRIDE_FILE_ENV)
    if not value:
        return None
    path = Path(value)
    return path if path.is_file() else None


class AppConfig(BaseSettings):
    """Everything the chat backend reads at startup or per request."""

    model_config = SettingsConfigDict(
        env_prefix="FLYBUS_",
        env_nested_delimiter="__",
        env_file=DOTENV_FILE,
        env_file_encoding="utf-8",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    third_party: ThirdPartyConfig = Field(
        default_factory=ThirdPartyConfig, description="Redis connection"
    )
    api: APIConfig = Field(
        default_factory=APIConfig, description="Auth, CORS and rate limiting"
    )
    session: SessionConfig = Field(
        default_factory=SessionConfig, description="Session context store"
    )
    llm: LLMConfig = Field(default_factory=LLMConfig, description="Chat model")
    broadcast: BroadcastConfig = Field(
        default_factory=BroadcastConfig, description="Conversation events"
    )
    prompt: PromptConfig = Field(
        default_factory=PromptConfig, description="Generation prompt"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    knowledge: KnowledgeCorpus = Field(
        default_factory=KnowledgeCorpus, description="Flybus knowledge corpus"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        override = _override_file()
        overrides = (
            [YamlConfigSettingsSource(settings_cls, yaml_file=override)]
            if override is not None
            else []
        )
        return (
            *overrides,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
            file_secret_settings,
        )


def get_app_config() -> AppConfig:
    return AppConfig()


def get_api_config() -> APIConfig:
    return get_app_config().api


def get_llm_config() -> LLMConfig:
    return get_app_config().llm
