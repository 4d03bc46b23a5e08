"""
Database Engine

Builds the SQLAlchemy async engine for the wallet submission table.

Production runs on Postgres through asyncpg; tests run the same code on
SQLite through aiosqlite.
"""

from __future__ import annotations

import logging
import ssl
from typing import Any, Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from core.config.runtime import DatabaseConfig


logger = logging.getLogger(__name__)


def normalize_database_url(raw_url: str) -> tuple[URL, Optional[str]]:
    """
    Rewrite a connection URL for the async driver.

    ``postgres://`` and ``postgresql://`` become ``postgresql+asyncpg://``.
    A ``sslmode`` query parameter (libpq style, which asyncpg rejects) is
    removed and returned so it can act as the SSL mode.

    Raises:
        ValueError: If the URL is empty or unparsable
    """
    if not raw_url or "://" not in raw_url:
        raise ValueError("DATABASE_URL is not configured or invalid")

    if raw_url.startswith("postgres://"):
        raw_url = "postgresql://" + raw_url[len("postgres://"):]

    url = make_url(raw_url)
    if url.drivername == "postgresql":
        url = url.set(drivername="postgresql+asyncpg")

    sslmode = None
    if "sslmode" in url.query:
        sslmode = url.query["sslmode"]
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        url = url.difference_update_query(["sslmode"])

    return url, sslmode


def ssl_setting(sslmode: Optional[str]) -> Any:
    """
    Map PGSSLMODE to the asyncpg ``ssl`` connect argument.

    - ``require``: TLS without certificate verification
    - ``disable``, ``allow`` or empty: TLS off
    - anything else (including unset): None, meaning driver default
    """
    if sslmode is None:
        return None
    mode = sslmode.strip().lower()
    if mode == "require":
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context
    if mode in ("", "disable", "allow"):
        return False
    return None


def create_engine_from_config(config: DatabaseConfig) -> AsyncEngine:
    """
    Create the async engine described by ``config``.

    Raises:
        ValueError: If no database URL is configured
    """
    if not config.url:
        raise ValueError("DATABASE_URL is required to start the submission store")

    url, url_sslmode = normalize_database_url(config.url)
    sslmode = config.sslmode if config.sslmode is not None else url_sslmode

    kwargs: dict[str, Any] = {
        "pool_pre_ping": config.pool_pre_ping,
        "echo": config.echo,
    }
    if url.get_backend_name() == "postgresql":
        kwargs["pool_size"] = config.pool_size
        ssl_arg = ssl_setting(sslmode)
        if ssl_arg is not None:
            kwargs["connect_args"] = {"ssl": ssl_arg}

    # Only the host part is logged; the URL may carry credentials
    logger.info(
        "Creating AsyncEngine for %s (sslmode=%s)",
        url.render_as_string(hide_password=True).split("@")[-1],
        sslmode or "default",
    )
    return create_async_engine(url, **kwargs)


__all__ = [
    "normalize_database_url",
    "ssl_setting",
    "create_engine_from_config",
]
