"""Configuration management."""

from .config import (
    Config,
    BackendConfig,
    SchemaConfig,
    PasteConfig,
    LoggingConfig,
    load_config,
)
from .credentials import Credentials, MissingCredentialsError, resolve_credentials

__all__ = [
    "Config",
    "BackendConfig",
    "SchemaConfig",
    "PasteConfig",
    "LoggingConfig",
    "load_config",
    "Credentials",
    "MissingCredentialsError",
    "resolve_credentials",
]
