"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.deps import load_runtime_config
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    validation_error_handler,
)
from api.routes import health, submissions
from core.config.runtime import RuntimeConfig
from core.storage.database import create_engine_from_config
from core.storage.submissions import SubmissionStore, init_schema


logger = logging.getLogger(__name__)


def _resolve_log_level(config: RuntimeConfig) -> int:
    """Resolve log level from CABAL_LOG_LEVEL / cabal.json, defaulting to INFO."""
    return getattr(logging, (config.server.log_level or "INFO").upper(), logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Open the database engine and ensure the table exists; dispose the
    pool on shutdown (uvicorn maps SIGINT/SIGTERM to this).
    """
    config: RuntimeConfig = app.state.config
    engine = create_engine_from_config(config.database)
    try:
        await init_schema(engine)
        app.state.submission_store = SubmissionStore(engine)
        yield
    finally:
        logger.info("Closing database pool")
        await engine.dispose()


def create_app(config: Optional[RuntimeConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = load_runtime_config()

    app = FastAPI(
        title="Cabal Wallet Submission API",
        description="""
Records wallet addresses submitted through the signup form.

## Endpoints

- **GET /api/wallet-submissions** - Submitted wallets, newest first
- **POST /api/wallet-submissions** - Record a wallet address
- **GET /health** - Health check

Addresses are stored lower-case; resubmitting refreshes the timestamp.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(submissions.router)

    return app


def run(config: Optional[RuntimeConfig] = None, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    if config is None:
        config = load_runtime_config()
    logging.basicConfig(
        level=_resolve_log_level(config),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config),
        host=host or config.server.host,
        port=port or config.server.port,
    )


# Configure logging and create the application instance
_config = load_runtime_config()
logging.basicConfig(
    level=_resolve_log_level(_config),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
app = create_app(_config)


if __name__ == "__main__":
    run()
