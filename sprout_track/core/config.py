"""
Configuration Management.

Two sources, mirroring how the CLI is run:

Environment (SPROUT_TRACK_*):
    CONFIG_DIR, TIMEOUT, LOG_LEVEL, LOG_FORMAT, LOG_FILE

Settings file (config.yaml in the app directory):
    server, token, token_expires, family_slug, default_baby_id,
    output_format, cached_settings

The settings file is the flat local mirror the commands read and write.
It is validated against CliConfig at load time.
"""

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import typer
import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sprout_track.core.config_schema import CliConfig
from sprout_track.core.exceptions import ConfigurationError

APP_NAME = "sprout-track"
CONFIG_FILENAME = "config.yaml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Process-level settings loaded from the environment."""

    config_dir: Path | None = None
    timeout: float = 30.0
    log_level: LogLevel = "WARNING"
    log_format: Literal["console", "json"] = "console"
    log_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="SPROUT_TRACK_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid SPROUT_TRACK_* environment settings:\n{e}") from e


def default_config_dir(settings: Settings | None = None) -> Path:
    """Resolve the directory holding config.yaml."""
    settings = settings or get_settings()
    if settings.config_dir is not None:
        return settings.config_dir
    return Path(typer.get_app_dir(APP_NAME))


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning an empty dict for a missing or empty file."""
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping")
    return data


class ConfigStore:
    """
    Key-value settings file for the CLI.

    Values are read once and cached; every setter writes the whole file
    back immediately.

    Usage:
        store = ConfigStore(Path("~/.config/sprout-track/config.yaml"))
        store.update(server="https://tracker.example.com")
        store.config.server
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._config: CliConfig | None = None

    @classmethod
    def default(cls, settings: Settings | None = None) -> "ConfigStore":
        return cls(default_config_dir(settings) / CONFIG_FILENAME)

    @property
    def config(self) -> CliConfig:
        """Current configuration, loaded on first access."""
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CliConfig:
        raw = load_yaml_config(self.path)
        try:
            return CliConfig(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {self.path}:\n{e}") from e

    def save(self, config: CliConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = config.model_dump(mode="json", exclude_none=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        self._config = config

    def update(self, **changes: Any) -> CliConfig:
        """Apply changes (None clears a key) and persist."""
        merged = self.config.model_dump()
        merged.update(changes)
        try:
            config = CliConfig(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration value:\n{e}") from e
        self.save(config)
        return config

    def reset(self) -> CliConfig:
        """Clear everything, including credentials, back to defaults."""
        config = CliConfig()
        self.save(config)
        return config

    def set_token(self, token: str, expires_at: datetime | None = None) -> None:
        self.update(token=token, token_expires=expires_at)

    def clear_token(self) -> None:
        self.update(token=None, token_expires=None)

    def is_token_expired(self, now: datetime | None = None) -> bool:
        expires = self.config.token_expires
        if expires is None:
            return False
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires < (now or datetime.now(timezone.utc))
