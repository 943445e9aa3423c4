"""policystore configuration: Pydantic model and TOML loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from policystore.core.constants import CONFIG_FILENAME, DB_FILENAME, POLICYSTORE_DIR_NAME
from policystore.core.exceptions import ConfigError, ConfigNotFoundError


def policystore_dir() -> Path:
    """Return the policystore directory (~/.policystore), creating it if needed."""
    d = Path.home() / POLICYSTORE_DIR_NAME
    d.mkdir(mode=0o700, parents=True, exist_ok=True)
    return d


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"  # "text" | "json"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()


class DatabaseConfig(BaseModel):
    path: str = ""  # empty → use default


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


class PolicyStoreConfig(BaseModel):
    """Root policystore configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @property
    def db_path(self) -> Path:
        if self.database.path:
            return Path(self.database.path).expanduser()
        return policystore_dir() / DB_FILENAME


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _config_file_path() -> Path:
    if env_path := os.environ.get("POLICYSTORE_CONFIG"):
        return Path(env_path)
    return Path.home() / POLICYSTORE_DIR_NAME / CONFIG_FILENAME


def load_config(path: Path | None = None) -> PolicyStoreConfig:
    """
    Load PolicyStoreConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (POLICYSTORE_*)
      2. Config file (~/.policystore/config.toml)
    """
    import tomllib

    cfg_path = path or _config_file_path()

    if not cfg_path.exists():
        raise ConfigNotFoundError(f"Config file not found: {cfg_path}")

    try:
        with open(cfg_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    _apply_env_overrides(data)

    try:
        return PolicyStoreConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {cfg_path}: {exc}") from exc


def default_config() -> PolicyStoreConfig:
    """Return the built-in defaults with POLICYSTORE_* overrides applied."""
    data: dict[str, Any] = {}
    _apply_env_overrides(data)
    try:
        return PolicyStoreConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid environment configuration: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay POLICYSTORE_* environment variables onto the parsed TOML data."""
    if level := os.environ.get("POLICYSTORE_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level
    if db := os.environ.get("POLICYSTORE_DB_PATH"):
        data.setdefault("database", {})["path"] = db
