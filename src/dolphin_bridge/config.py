"""Runtime configuration for the Dolphin bridge."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COMMAND_TEMPLATE = 'tellraw @a [{"color": "white", "text": "<%username%> %message%"}]'


class ConfigError(ValueError):
    """Raised when configuration cannot be loaded."""


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="DOLPHIN_", env_file=".env", extra="ignore")

    app_name: str = "dolphin-bridge"
    log_level: str = "INFO"
    bot_label: str = Field(default="Dolphin", description="Origin label for server-generated events.")

    rcon_host: str = "localhost"
    rcon_port: int = Field(default=25575, ge=1, le=65535)
    rcon_password: SecretStr = SecretStr("")
    rcon_timeout_seconds: float = Field(default=10.0, gt=0)
    command_template: str = Field(
        default=DEFAULT_COMMAND_TEMPLATE,
        description="Console command for chat messages; %username% and %message% are substituted.",
    )
    chunk_size: int = Field(default=100, ge=1)

    custom_death_keywords: list[str] = Field(default_factory=list)
    use_log_file: bool = True
    log_file_path: str = "/home/minecraft/server/logs/latest.log"
    follow_poll_interval_seconds: float = Field(default=0.25, gt=0)
    event_queue_maxsize: int = Field(
        default=0,
        ge=0,
        description="0 keeps the event queue unbounded; events then accumulate if the sender stalls.",
    )


def load_settings(config_file: str | Path | None = None) -> Settings:
    """Build settings from the environment, overridden by a TOML file when given."""
    if config_file is None:
        return Settings()

    path = Path(config_file).expanduser()
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        values = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    return Settings(**values)
