"""REST API adapter for flat_db.

This module provides a FastAPI-based REST API for executing statements
against a DatabaseEngine.

Endpoints:
    POST /execute - Execute a statement
    GET /tables - List existing tables
    GET /health - Health check

Usage:
    from flat_db.adapters.inbound.rest_api import create_app
    from flat_db.application import DatabaseEngine

    db = DatabaseEngine(data_dir="/path/to/data")
    db.start()

    app = create_app(db)
    # Run with uvicorn: uvicorn app:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from flat_db import __version__
from flat_db.application import DatabaseEngine, ExecutionResult
from flat_db.infrastructure.config import Config, get_config
from flat_db.infrastructure.logging import setup_logging_from
from flat_db.infrastructure.metrics import setup_metrics
from flat_db.infrastructure.tracing import setup_tracing


class SQLRequest(BaseModel):
    """Request model for statement execution."""

    sql: str = Field(..., description="Statement to execute")


class SQLResponse(BaseModel):
    """Response model for statement execution."""

    success: bool = Field(..., description="Whether the statement succeeded")
    lines: list[str] = Field(default_factory=list, description="Result lines")
    error: str | None = Field(None, description="Error line when the statement failed")


class TablesResponse(BaseModel):
    """Response model for table listing."""

    tables: list[str] = Field(default_factory=list, description="Existing table names")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


def _result_to_response(result: ExecutionResult) -> SQLResponse:
    """Convert ExecutionResult to SQLResponse."""
    return SQLResponse(success=result.success, lines=result.lines, error=result.error)


def create_app(db: DatabaseEngine) -> FastAPI:
    """Create a FastAPI application for the database engine.

    Args:
        db: The database engine to use.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="Flat DB API",
        description="REST API for executing statements",
        version=__version__,
    )

    statement_lock = threading.Lock()

    def _require_started() -> None:
        if not db.is_started:
            raise HTTPException(status_code=503, detail="Database not started")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy" if db.is_started else "unhealthy",
            version=__version__,
        )

    @app.get("/tables", response_model=TablesResponse, tags=["Tables"])
    def list_tables() -> TablesResponse:
        """List existing tables."""
        _require_started()
        return TablesResponse(tables=db.store.list_tables())

    # Handlers run in a threadpool; statements must still run one at a time.
    @app.post("/execute", response_model=SQLResponse, tags=["SQL"])
    def execute_sql(request: SQLRequest) -> SQLResponse:
        """Execute a statement.

        Args:
            request: The request containing the statement.

        Returns:
            The execution result.
        """
        _require_started()
        with statement_lock:
            result = db.execute(request.sql)
        return _result_to_response(result)

    return app


def run_server(config: Config | None = None) -> None:
    """Run the REST API server with logging, metrics and tracing set up.

    Args:
        config: Configuration (default: the global configuration).
    """
    import uvicorn

    config = config or get_config()
    setup_logging_from(config.observability)
    setup_tracing(config.observability)
    metrics = setup_metrics(port=config.server.metrics_port)

    with DatabaseEngine(config=config, metrics=metrics) as db:
        app = create_app(db)
        uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run_server()
