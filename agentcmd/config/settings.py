"""Configuration settings."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from agentcmd.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.agentcmd/config.yaml"
CONFIG_ENV_VAR = "AGENTCMD_CONFIG"

REQUIRED_KEYS = ["allowed-tools", "description", "argument-hint"]


def _expand(path: str | None) -> str | None:
    if not path:
        return path
    return str(Path(path).expanduser())


@dataclass
class CommandsConfig:
    """Where command files are discovered."""

    personal_dir: str = "~/.claude/commands"
    plugins_dir: str = "~/.claude/plugins"
    project_path: str | None = None
    extra_dirs: list[str] = field(default_factory=list)
    reserved_names: list[str] = field(default_factory=list)


@dataclass
class ValidationConfig:
    """Validation rules for command files."""

    required_keys: list[str] = field(default_factory=lambda: list(REQUIRED_KEYS))
    require_arguments_placeholder: bool = True
    max_description_length: int = 256


@dataclass
class DatabaseConfig:
    """Usage log database settings."""

    path: str = "~/.agentcmd/usage.db"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "WARNING"


@dataclass
class Config:
    """Main configuration."""

    commands: CommandsConfig = field(default_factory=CommandsConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Pick the config file: explicit path, then $AGENTCMD_CONFIG, then default."""
    if path is not None:
        return Path(path).expanduser()
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path(DEFAULT_CONFIG_PATH).expanduser()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file."""
    path = resolve_config_path(path)

    if not path.exists():
        logger.info(f"No config at {path}, using defaults")
        return _parse_config({})

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.info(f"Loaded config from {path}")
    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse config dictionary into Config object."""
    config = Config()

    if "commands" in data:
        commands = data["commands"] or {}
        config.commands = CommandsConfig(
            personal_dir=commands.get("personal_dir", "~/.claude/commands"),
            plugins_dir=commands.get("plugins_dir", "~/.claude/plugins"),
            project_path=commands.get("project_path"),
            extra_dirs=commands.get("extra_dirs", []) or [],
            reserved_names=commands.get("reserved_names", []) or [],
        )

    if "validation" in data:
        validation = data["validation"] or {}
        config.validation = ValidationConfig(
            required_keys=validation.get("required_keys", list(REQUIRED_KEYS)),
            require_arguments_placeholder=validation.get(
                "require_arguments_placeholder", True
            ),
            max_description_length=validation.get("max_description_length", 256),
        )

    if "logging" in data:
        config.logging = LoggingConfig(
            level=str((data["logging"] or {}).get("level", "WARNING")).upper()
        )

    db_path = (data.get("database") or {}).get("path", "~/.agentcmd/usage.db")
    config.database = DatabaseConfig(path=_expand(db_path))

    config.commands.personal_dir = _expand(config.commands.personal_dir)
    config.commands.plugins_dir = _expand(config.commands.plugins_dir)
    config.commands.project_path = _expand(config.commands.project_path)
    config.commands.extra_dirs = [_expand(d) for d in config.commands.extra_dirs]

    return config
