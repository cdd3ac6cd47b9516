"""Configuration management for termbbs.

Loads settings from a YAML configuration file with environment variable
overrides (``TERMBBS_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/termbbs.yaml")


class ServerConfig(BaseModel):
    hostname: str = Field(default="127.0.0.1")
    port: int = Field(default=1981, ge=1, le=65535)
    banner_file: Path | None = Field(default=None, description="Text file shown on connect")
    welcome_msg: str | None = Field(default="Welcome to this BBS!")


class StoreConfig(BaseModel):
    users_file: Path = Field(default=Path("users.json"))
    messages_file: Path = Field(default=Path("messages.json"))


class SecurityConfig(BaseModel):
    max_login_attempts: int = Field(default=3, gt=0)
    login_backoff: float = Field(default=1.0, ge=0, description="Seconds, multiplied by attempt number")
    idle_timeout: float = Field(default=900.0, ge=0, description="Seconds; 0 disables")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    min_password_length: int = Field(default=1, ge=1)


class DisplayConfig(BaseModel):
    use_ansi: bool = Field(default=True)
    prompt: str = Field(default="> ")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the termbbs service.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "TERMBBS_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Sections present in the YAML file take precedence over the
    environment; anything the file leaves out falls back to env vars,
    then .env, then defaults.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)


def read_banner(config: ServerConfig) -> str | None:
    """Return the banner file contents, or None if unset or unreadable."""
    if config.banner_file is None:
        return None
    try:
        return config.banner_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Could not read banner file %s: %s", config.banner_file, e)
        return None
