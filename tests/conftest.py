"""Pytest configuration and fixtures for flat_db tests."""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from flat_db.adapters.outbound import CsvTableStore, InMemoryTableStore
from flat_db.application import DatabaseEngine
from flat_db.infrastructure.config import Config, StorageConfig
from flat_db.infrastructure.logging import setup_logging
from flat_db.infrastructure.metrics import MetricsRegistry


@pytest.fixture(scope="session", autouse=True)
def quiet_logging() -> None:
    """Keep log lines off stdout, where statement results are asserted."""
    setup_logging(level="WARNING", stream=sys.__stderr__)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(storage=StorageConfig(data_dir=temp_dir / "data"))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def csv_store(test_config: Config, metrics_registry: MetricsRegistry) -> CsvTableStore:
    """Provide a CSV table store rooted in the temporary data directory."""
    return CsvTableStore(storage_config=test_config.storage, metrics=metrics_registry)


@pytest.fixture
def memory_store() -> InMemoryTableStore:
    """Provide an empty in-memory table store."""
    return InMemoryTableStore()


@pytest.fixture
def engine(
    test_config: Config, metrics_registry: MetricsRegistry
) -> Generator[DatabaseEngine, None, None]:
    """Provide a started engine writing to the temporary data directory."""
    with DatabaseEngine(config=test_config, metrics=metrics_registry) as db:
        yield db


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
