from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashify.domain.constants import (
    CARDS_PER_GENERATION,
    DEFAULT_CHART_DAYS,
    TEXT_MODEL,
    TOPIC_MODEL,
)

CONFIG_FILES = [
    Path.home() / ".config/flashify/config.toml",
    Path.home() / ".flashify.toml",
]


class AppConfig(BaseSettings):
    """
    Configuration model for Flashify.
    Supports loading from:
    1. Environment variables (FLASHIFY_*, plus GEMINI_API_KEY)
    2. Config file (~/.config/flashify/config.toml)
    3. Manual overrides
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHIFY_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/flashify")
    storage_backend: Literal["file", "memory"] = "file"

    # Generation
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "FLASHIFY_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    topic_model: str = TOPIC_MODEL
    text_model: str = TEXT_MODEL
    cards_per_generation: int = Field(default=CARDS_PER_GENERATION, ge=1)

    # Stats
    chart_days: int = Field(default=DEFAULT_CHART_DAYS, ge=1)

    # Server
    host: str = "127.0.0.1"
    port: int = 8777
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in CONFIG_FILES if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/flashify/config.toml (if exists)
    3. Environment variables (FLASHIFY_*)
    4. overrides (None values are ignored)
    """
    clean = {k: v for k, v in (overrides or {}).items() if v is not None}
    return AppConfig(**clean)
