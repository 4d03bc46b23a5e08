"""
Runtime Configuration

Central configuration for the submission API, the chain client, and tooling.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DatabaseConfig:
    """Configuration for the wallet submission database."""
    url: Optional[str] = None
    sslmode: Optional[str] = None
    pool_size: int = 5
    pool_pre_ping: bool = True
    echo: bool = False


@dataclass
class ServerConfig:
    """Configuration for the HTTP API."""
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    # Development only: return the driver's message on storage failures
    expose_storage_errors: bool = False


@dataclass
class ChainConfig:
    """Configuration for the target chain and NFT contract."""
    chain_id: int = 11124
    chain_name: str = "Abstract"
    native_symbol: str = "ETH"
    native_decimals: int = 18
    rpc_url: Optional[str] = "https://api.testnet.abstract.network/"
    explorer_url: Optional[str] = "https://explorer-testnet.abstract.network/"
    contract_address: Optional[str] = None
    minting_config: Optional[str] = None
    private_key: Optional[str] = None

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)


@dataclass
class ClientConfig:
    """Configuration for the mint-flow and submission clients."""
    api_base_url: str = ""
    submission_source: str = "landing-join-footer"
    status_reset_s: float = 5.0
    max_quantity: int = 10


@dataclass
class HttpConfig:
    """Configuration for HTTP client."""
    timeout: float = 30.0
    user_agent: str = "cabal-mint/0.1"


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - DATABASE_URL: Postgres connection URL
        - PGSSLMODE: require | disable | allow | (other: driver default)
        - HOST, PORT: API bind address
        - CABAL_LOG_LEVEL: API log level
        - CABAL_EXPOSE_STORAGE_ERRORS: Return driver messages (true/false)
        - CABAL_CHAIN_ID, CABAL_CHAIN_NAME: Target network
        - CABAL_RPC_URL, CABAL_EXPLORER_URL: Network endpoints
        - CABAL_CONTRACT_ADDRESS: NFT contract
        - CABAL_MINTING_CONFIG: Path to mintingConfig.json
        - CABAL_PRIVATE_KEY: Local signing key for CLI mints
        - CABAL_API_BASE_URL: Base URL of the submission API
        """
        overrides: dict[str, Any] = {}

        # Database
        if os.getenv("DATABASE_URL"):
            overrides.setdefault("database", {})["url"] = os.getenv("DATABASE_URL")
        if os.getenv("PGSSLMODE") is not None:
            overrides.setdefault("database", {})["sslmode"] = os.getenv("PGSSLMODE")

        # Server
        if os.getenv("HOST"):
            overrides.setdefault("server", {})["host"] = os.getenv("HOST")
        if os.getenv("PORT"):
            overrides.setdefault("server", {})["port"] = int(os.getenv("PORT"))
        if os.getenv("CABAL_LOG_LEVEL"):
            overrides.setdefault("server", {})["log_level"] = os.getenv("CABAL_LOG_LEVEL")
        if os.getenv("CABAL_EXPOSE_STORAGE_ERRORS"):
            overrides.setdefault("server", {})["expose_storage_errors"] = _env_bool(
                "CABAL_EXPOSE_STORAGE_ERRORS"
            )

        # Chain
        if os.getenv("CABAL_CHAIN_ID"):
            overrides.setdefault("chain", {})["chain_id"] = int(os.getenv("CABAL_CHAIN_ID"), 0)
        for env_name, key in (
            ("CABAL_CHAIN_NAME", "chain_name"),
            ("CABAL_RPC_URL", "rpc_url"),
            ("CABAL_EXPLORER_URL", "explorer_url"),
            ("CABAL_CONTRACT_ADDRESS", "contract_address"),
            ("CABAL_MINTING_CONFIG", "minting_config"),
            ("CABAL_PRIVATE_KEY", "private_key"),
        ):
            if os.getenv(env_name):
                overrides.setdefault("chain", {})[key] = os.getenv(env_name)

        # Client
        if os.getenv("CABAL_API_BASE_URL") is not None:
            overrides.setdefault("client", {})["api_base_url"] = os.getenv("CABAL_API_BASE_URL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        database_data = data.get("database", {})
        server_data = data.get("server", {})
        chain_data = data.get("chain", {})
        client_data = data.get("client", {})
        http_data = data.get("http", {})

        return cls(
            database=DatabaseConfig(**database_data) if database_data else DatabaseConfig(),
            server=ServerConfig(**server_data) if server_data else ServerConfig(),
            chain=ChainConfig(**chain_data) if chain_data else ChainConfig(),
            client=ClientConfig(**client_data) if client_data else ClientConfig(),
            http=HttpConfig(**http_data) if http_data else HttpConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Secrets (database URL credentials, private key) are not included.
        """
        return {
            "database": {
                "sslmode": self.database.sslmode,
                "pool_size": self.database.pool_size,
                "pool_pre_ping": self.database.pool_pre_ping,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "cors_origins": list(self.server.cors_origins),
                "log_level": self.server.log_level,
                "expose_storage_errors": self.server.expose_storage_errors,
            },
            "chain": {
                "chain_id": self.chain.chain_id,
                "chain_name": self.chain.chain_name,
                "rpc_url": self.chain.rpc_url,
                "explorer_url": self.chain.explorer_url,
                "contract_address": self.chain.contract_address,
                "minting_config": self.chain.minting_config,
            },
            "client": {
                "api_base_url": self.client.api_base_url,
                "submission_source": self.client.submission_source,
                "status_reset_s": self.client.status_reset_s,
            },
            "http": {
                "timeout": self.http.timeout,
            },
            "extra": self.extra,
        }

