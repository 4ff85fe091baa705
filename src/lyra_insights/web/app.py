"""
FastAPI application for Lyra Insights.

PURPOSE: Application factory and server runner.
AI CONTEXT: Creates app with all routes registered.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from ..config import Config
from .routes import router

__all__ = ["create_app", "run_server"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001
    """
    Log startup and shutdown around the request-serving lifetime.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    logger.info("Lyra Insights API starting (v%s)", __version__)
    yield
    logger.info("Lyra Insights API shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Factory function so tests and uvicorn each get a fresh instance.

    Business context: The mobile app fetches insight cards (mood & weather,
    savings) and chart geometry from this API; support tooling fetches the
    rendered PNG charts.

    Returns:
        Configured FastAPI application with:
        - JSON routes under /api
        - PNG chart routes under /charts
        - OpenAPI documentation at /docs

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get('/api/health').json()['status']
        'ok'
    """
    app = FastAPI(
        title="Lyra Insights",
        description="Time-series alignment, correlation and chart geometry",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


def run_server(
    host: str = Config.DEFAULT_HOST,
    port: int = Config.DEFAULT_PORT,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Lyra Insights API server.

    Args:
        host: Interface to bind. '127.0.0.1' (default) for local-only access.
        port: TCP port. Default 8000.
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity.

    Returns:
        None. Blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.

    Example:
        >>> run_server(port=8080, reload=True)
    """
    uvicorn.run(
        "lyra_insights.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    run_server()
