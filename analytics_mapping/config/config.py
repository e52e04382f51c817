"""Configuration management for the analytics mapping toolkit."""

from dataclasses import dataclass, field
from typing import Optional
import yaml
from pathlib import Path


DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"


@dataclass
class BackendConfig:
    """Connection settings for the Analytics Engine SQL API."""

    account_id: Optional[str] = None
    api_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0


@dataclass
class SchemaConfig:
    """Number of raw columns per category in a dataset."""

    blob_columns: int = 20
    double_columns: int = 20
    index_columns: int = 1


@dataclass
class PasteConfig:
    """Configuration for bulk paste of friendly names."""

    preserve_empty_fields: bool = True  # Empty CSV fields keep their column slot


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = "INFO"
    structured: bool = False
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    schema: SchemaConfig = field(default_factory=SchemaConfig)
    paste: PasteConfig = field(default_factory=PasteConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration

    Example YAML format:
        backend:
          account_id: 0123456789abcdef
          api_token: secret
          timeout_seconds: 15

        schema:
          blob_columns: 20
          double_columns: 20
          index_columns: 1

        paste:
          preserve_empty_fields: true

        logging:
          level: DEBUG
          structured: true
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}

    backend = BackendConfig(**_section(data, "backend"))
    schema = SchemaConfig(**_section(data, "schema"))
    paste = PasteConfig(**_section(data, "paste"))
    logging_config = LoggingConfig(**_section(data, "logging"))

    return Config(
        backend=backend, schema=schema, paste=paste, logging=logging_config
    )


def _section(data: dict, name: str) -> dict:
    """Return a config section, treating an empty section as defaults."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section
