"""Tests for configuration loading."""

import pytest
from pathlib import Path

from analytics_mapping.config import load_config, Config


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_load_example_config():
    """Test loading the example configuration."""
    config_path = Path(__file__).parent.parent / "config" / "example_config.yaml"

    if not config_path.exists():
        pytest.skip("Example config not found")

    config = load_config(str(config_path))

    assert config.backend.account_id == "0123456789abcdef0123456789abcdef"
    assert config.backend.timeout_seconds == 15
    assert config.schema.blob_columns == 20
    assert config.schema.index_columns == 1
    assert config.paste.preserve_empty_fields is True
    assert config.logging.level == "INFO"


def test_defaults():
    config = Config()

    assert config.backend.account_id is None
    assert config.backend.base_url == "https://api.cloudflare.com/client/v4"
    assert config.backend.timeout_seconds == 30.0
    assert config.schema.double_columns == 20
    assert config.paste.preserve_empty_fields is True
    assert config.logging.structured is False


def test_load_partial_config(tmp_path):
    """Sections not present keep their defaults."""
    config = load_config(_write(tmp_path, "paste:\n  preserve_empty_fields: false\n"))

    assert config.paste.preserve_empty_fields is False
    assert config.schema.blob_columns == 20
    assert config.backend.api_token is None


def test_load_empty_file(tmp_path):
    assert load_config(_write(tmp_path, "")) == Config()


def test_empty_section_uses_defaults(tmp_path):
    config = load_config(_write(tmp_path, "backend:\nschema:\n  blob_columns: 5\n"))

    assert config.backend.timeout_seconds == 30.0
    assert config.schema.blob_columns == 5


def test_unknown_key_rejected(tmp_path):
    with pytest.raises(TypeError):
        load_config(_write(tmp_path, "schema:\n  text_columns: 4\n"))


def test_section_must_be_mapping(tmp_path):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, "backend: nope\n"))


def test_missing_config_file():
    """Test error handling for missing config file."""
    with pytest.raises(FileNotFoundError):
        load_config("nonexistent_config.yaml")
