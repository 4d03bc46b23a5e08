"""
Module 09C - CLI Configuration

Configuration management for the cabal CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.config.runtime import RuntimeConfig


# Environment variable prefix
ENV_PREFIX = "CABAL_"

DEFAULT_CONFIG_PATHS = (
    Path("cabal.json"),
    Path(".cabal.json"),
    Path.home() / ".config" / "cabal" / "config.json",
)


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Where the file values came from, if anywhere
    source: str | None = None


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file, or YAML for .yaml/.yml paths."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data: dict[str, Any] = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    config = CLIConfig(runtime=RuntimeConfig.from_dict(data), source=str(path))
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.runtime = config.runtime.with_env_overrides()

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "database": {
    "pool_size": 5,
    "pool_pre_ping": true
  },
  "server": {
    "host": "0.0.0.0",
    "port": 3001,
    "cors_origins": ["*"],
    "expose_storage_errors": false
  },
  "chain": {
    "chain_id": 11124,
    "chain_name": "Abstract",
    "rpc_url": "https://api.testnet.abstract.network/",
    "explorer_url": "https://explorer-testnet.abstract.network/",
    "contract_address": null,
    "minting_config": "mintingConfig.json"
  },
  "client": {
    "api_base_url": "http://localhost:3001"
  }
}
"""
