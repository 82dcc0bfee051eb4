from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from vocabu.domain.constants import DEFAULT_FALLBACK_SIZE, DEFAULT_SESSION_LIMIT


class AppConfig(BaseSettings):
    """
    Configuration model for vocabu.
    Supports loading from:
    1. Config file (~/.config/vocabu/config.toml)
    2. Environment variables (VOCABU_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="VOCABU_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/vocabu")

    # Scheduling
    fallback_size: int = Field(default=DEFAULT_FALLBACK_SIZE, ge=0)
    session_limit: int = Field(default=DEFAULT_SESSION_LIMIT, ge=1)
    first_touch_preset: Literal["none", "standard", "comfort"] = "none"

    # Output
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

        # Earlier sources win: CLI overrides, then env, then the TOML file.
        config_file = Path.home() / ".config/vocabu/config.toml"
        if config_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=config_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @property
    def preset(self) -> str | None:
        """First-touch preset name, or None when disabled."""
        return None if self.first_touch_preset == "none" else self.first_touch_preset


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/vocabu/config.toml (if exists)
    3. Environment variables (VOCABU_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
