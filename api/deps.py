"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the runtime config and the submission store.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from fastapi import Request

from core.config.runtime import RuntimeConfig
from core.storage.submissions import SubmissionStore

logger = logging.getLogger(__name__)


CONFIG_SEARCH_PATHS = (
    Path("cabal.json"),
    Path(".cabal.json"),
    Path.home() / ".config" / "cabal" / "config.json",
)


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./cabal.json
      2. ./.cabal.json
      3. ~/.config/cabal/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    config: RuntimeConfig | None = None

    for path in CONFIG_SEARCH_PATHS:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        # No config file found, start with defaults
        config = RuntimeConfig()

    # Always apply environment variable overrides
    return config.with_env_overrides()


def get_config(request: Request) -> RuntimeConfig:
    """The config the application was created with."""
    return request.app.state.config


def get_submission_store(request: Request) -> SubmissionStore:
    """The store bound to the engine opened in the application lifespan."""
    return request.app.state.submission_store
