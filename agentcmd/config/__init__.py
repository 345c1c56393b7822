"""Configuration module."""
from .settings import (
    Config,
    CommandsConfig,
    DatabaseConfig,
    LoggingConfig,
    ValidationConfig,
    load_config,
)

__all__ = [
    "Config",
    "CommandsConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "ValidationConfig",
    "load_config",
]
