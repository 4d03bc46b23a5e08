"""
Runtime Configuration Module

Provides configuration loading and management for the submission API and
mint tooling.
"""

from .runtime import (
    ChainConfig,
    ClientConfig,
    DatabaseConfig,
    HttpConfig,
    RuntimeConfig,
    ServerConfig,
)

__all__ = [
    "RuntimeConfig",
    "DatabaseConfig",
    "ServerConfig",
    "ChainConfig",
    "ClientConfig",
    "HttpConfig",
]
