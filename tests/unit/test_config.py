"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from flat_db.infrastructure.config import (
    Config,
    ObservabilityConfig,
    ServerConfig,
    StorageConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.storage.data_dir == Path("data")
        assert config.storage.schema_suffix == "_schema.csv"
        assert config.storage.data_suffix == "_data.csv"
        assert config.storage.null_token == "NULL"
        assert config.validation.strict_decimal_scale is False
        assert config.server.port == 8000
        assert config.observability.log_level == "WARNING"

    def test_custom_storage_config(self, temp_dir: Path) -> None:
        storage = StorageConfig(data_dir=temp_dir / "tables", null_token="\\N")

        assert storage.data_dir == temp_dir / "tables"
        assert storage.null_token == "\\N"

    def test_ensure_directories(self, temp_dir: Path) -> None:
        """Test that ensure_directories creates the data directory."""
        config = Config(storage=StorageConfig(data_dir=temp_dir / "a" / "b"))

        config.ensure_directories()

        assert (temp_dir / "a" / "b").is_dir()

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        """Nested settings are read from FLAT_DB_ variables."""
        monkeypatch.setenv("FLAT_DB_STORAGE__DATA_DIR", str(temp_dir))
        monkeypatch.setenv("FLAT_DB_VALIDATION__STRICT_DECIMAL_SCALE", "true")
        monkeypatch.setenv("FLAT_DB_SERVER__PORT", "9000")

        config = Config()

        assert config.storage.data_dir == temp_dir
        assert config.validation.strict_decimal_scale is True
        assert config.server.port == 9000

    def test_invalid_port(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)

    def test_empty_null_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig(null_token="")

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(log_level="VERBOSE")  # type: ignore[arg-type]

    def test_get_config_cached(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv("FLAT_DB_STORAGE__DATA_DIR", str(temp_dir / "cached"))
        get_config.cache_clear()
        try:
            assert get_config() is get_config()
            assert (temp_dir / "cached").is_dir()
        finally:
            get_config.cache_clear()
