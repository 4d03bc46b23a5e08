"""
Storage Module

Async SQLAlchemy engine factory and the wallet submission store.
"""

from .database import create_engine_from_config, normalize_database_url, ssl_setting
from .submissions import (
    SubmissionStore,
    extract_error_message,
    init_schema,
    metadata,
    utc_now,
    wallet_submissions,
)

__all__ = [
    "create_engine_from_config",
    "normalize_database_url",
    "ssl_setting",
    "SubmissionStore",
    "extract_error_message",
    "init_schema",
    "metadata",
    "utc_now",
    "wallet_submissions",
]
