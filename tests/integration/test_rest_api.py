"""Integration tests for the REST API."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from flat_db import __version__
from flat_db.adapters.inbound.rest_api import create_app
from flat_db.application import DatabaseEngine
from flat_db.infrastructure.config import Config
from flat_db.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def client(engine: DatabaseEngine) -> Generator[TestClient, None, None]:
    """Create a test client over a started engine."""
    with TestClient(create_app(engine)) as test_client:
        yield test_client


@pytest.mark.integration
class TestRestAPI:
    """Tests for the REST endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}

    def test_execute_success(self, client: TestClient) -> None:
        response = client.post("/execute", json={"sql": "CREATE TABLE t (a INT, b TEXT)"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["error"] is None
        assert body["lines"] == ["Table created: t", "Columns:", "  a INTEGER", "  b TEXT"]

    def test_execute_select(self, client: TestClient) -> None:
        client.post("/execute", json={"sql": "CREATE TABLE t (a INT, b TEXT)"})
        client.post("/execute", json={"sql": "INSERT INTO t VALUES (7, NULL)"})

        body = client.post("/execute", json={"sql": "SELECT b, a FROM t"}).json()

        assert body["lines"] == ["b (TEXT)\ta (INTEGER)", "---\t---", "NULL\t7"]

    def test_execute_failure(self, client: TestClient) -> None:
        """Statement errors are reported in the body, not as HTTP errors."""
        response = client.post("/execute", json={"sql": "SELECT * FROM ghosts"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["lines"] == []
        assert body["error"] == "Error: Table does not exist: ghosts"

    def test_execute_requires_sql(self, client: TestClient) -> None:
        response = client.post("/execute", json={})

        assert response.status_code == 422

    def test_list_tables(self, client: TestClient) -> None:
        for name in ("b_table", "a_table"):
            client.post("/execute", json={"sql": f"CREATE TABLE {name} (x INT)"})

        response = client.get("/tables")

        assert response.status_code == 200
        assert response.json() == {"tables": ["a_table", "b_table"]}


@pytest.mark.integration
class TestRestAPINotStarted:
    """Tests for an engine that has not been started."""

    @pytest.fixture
    def client(
        self, test_config: Config, metrics_registry: MetricsRegistry
    ) -> Generator[TestClient, None, None]:
        db = DatabaseEngine(config=test_config, metrics=metrics_registry)
        with TestClient(create_app(db)) as test_client:
            yield test_client

    def test_health_unhealthy(self, client: TestClient) -> None:
        assert client.get("/health").json()["status"] == "unhealthy"

    def test_execute_unavailable(self, client: TestClient) -> None:
        response = client.post("/execute", json={"sql": "SELECT * FROM t"})

        assert response.status_code == 503

    def test_tables_unavailable(self, client: TestClient) -> None:
        assert client.get("/tables").status_code == 503
