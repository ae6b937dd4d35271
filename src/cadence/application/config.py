from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cadence.domain.constants import (
    CONFIG_DIR_NAME,
    CONFIG_ENV_PREFIX,
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_EASY_INTERVAL_DAYS,
    DEFAULT_GRADUATING_INTERVAL_DAYS,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
)
from cadence.domain.models import StepLadderConfig


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config" / CONFIG_DIR_NAME / "config.toml",
        Path.home() / f".{CONFIG_DIR_NAME}.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for cadence.
    Supports loading from:
    1. Environment variables (CADENCE_*)
    2. Config file (~/.config/cadence/config.toml or ~/.cadence.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix=CONFIG_ENV_PREFIX,
        extra="ignore",
    )

    # Global step ladder (decks without an override use this)
    learning_steps: list[float] = Field(default_factory=lambda: list(DEFAULT_LEARNING_STEPS))
    relearning_steps: list[float] = Field(
        default_factory=lambda: list(DEFAULT_RELEARNING_STEPS)
    )
    graduating_interval_days: float = DEFAULT_GRADUATING_INTERVAL_DAYS
    easy_interval_days: float = DEFAULT_EASY_INTERVAL_DAYS

    # Memory model
    desired_retention: float = DEFAULT_DESIRED_RETENTION
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL

    # Paths
    deck_config_file: Path | None = None
    log_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config" / CONFIG_DIR_NAME / "logs"
    )

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
        toml_file = next((f for f in _config_files() if f.exists()), None)

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

    @field_validator("deck_config_file", mode="before")
    @classmethod
    def resolve_deck_config_file(cls, v: Any) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()

    def default_ladder(self) -> StepLadderConfig:
        """
        The global step ladder.

        Raises:
            ConfigurationError: If any ladder setting is invalid.
        """
        return StepLadderConfig(
            learning_steps=tuple(self.learning_steps),
            relearning_steps=tuple(self.relearning_steps),
            graduating_interval_days=self.graduating_interval_days,
            easy_interval_days=self.easy_interval_days,
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/cadence/config.toml (if exists)
    3. Environment variables (CADENCE_*)
    4. cli_overrides (passed from Typer)

    The global ladder is validated here so a bad ladder fails at load time.
    """
    # Typer passes None for options that were not given
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)
    config.default_ladder()
    return config
