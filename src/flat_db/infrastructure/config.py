"""Configuration management for flat_db."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    data_dir: Path = Field(default=Path("data"), description="Directory holding table files")
    schema_suffix: str = Field(
        default="_schema.csv", min_length=1, description="Schema file name suffix"
    )
    data_suffix: str = Field(default="_data.csv", min_length=1, description="Data file name suffix")
    null_token: str = Field(default="NULL", min_length=1, description="Stored marker for NULL")
    encoding: str = Field(default="utf-8", description="Text encoding of table files")


class ValidationConfig(BaseModel):
    """Value validation configuration."""

    strict_decimal_scale: bool = Field(
        default=False,
        description="Reject DECIMAL values with more fractional digits than the scale "
        "instead of rounding them half-up",
    )


class ServerConfig(BaseModel):
    """REST server configuration."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="flat_db", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for flat_db."""

    model_config = SettingsConfigDict(
        env_prefix="FLAT_DB_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
