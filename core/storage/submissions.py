"""
Wallet Submission Store

One table, ``wallet_submissions``, unique by address. Resubmitting an
address refreshes its timestamp; rows are never deleted here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import Column, DateTime, Integer, MetaData, Table, Text, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from core.allowlist.address import normalize_address
from core.schemas.errors import StorageError
from core.schemas.submissions import WalletSubmission


logger = logging.getLogger(__name__)

metadata = MetaData()

wallet_submissions = Table(
    "wallet_submissions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("address", Text, nullable=False, unique=True),
    Column(
        "submitted_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def extract_error_message(error: Any) -> str:
    """
    Best-effort human message from a driver or SQLAlchemy error.

    Looks at ``detail``, then the wrapped ``orig`` exception, then
    ``message``, then ``str(error)``.
    """
    if isinstance(error, str):
        return error

    detail = getattr(error, "detail", None)
    if isinstance(detail, str) and detail:
        return detail

    orig = getattr(error, "orig", None)
    if orig is not None and orig is not error:
        return extract_error_message(orig)

    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message

    text = str(error)
    return text or type(error).__name__


async def init_schema(engine: AsyncEngine) -> None:
    """Create the submissions table if it does not exist."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        raise StorageError(extract_error_message(e), operation="init_schema") from e
    logger.info("Ensured table %s exists", wallet_submissions.name)


def _insert_for(dialect_name: str):
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise StorageError(
        f"Unsupported database dialect: {dialect_name}",
        operation="upsert",
    )


class SubmissionStore:
    """
    Async access to the wallet_submissions table.

    Usage:
        store = SubmissionStore(engine)
        record = await store.upsert("0xABC...")
        rows = await store.list_submissions()
    """

    def __init__(self, engine: AsyncEngine, clock: Optional[Clock] = None) -> None:
        self.engine = engine
        self._clock = clock or utc_now

    def _upsert_statement(self, address: str, now: datetime):
        insert = _insert_for(self.engine.dialect.name)
        stmt = insert(wallet_submissions).values(address=address, submitted_at=now)
        # The conflict clause is the only guard against concurrent duplicates
        stmt = stmt.on_conflict_do_update(
            index_elements=[wallet_submissions.c.address],
            set_={"submitted_at": stmt.excluded.submitted_at},
        )
        return stmt.returning(
            wallet_submissions.c.address,
            wallet_submissions.c.submitted_at,
        )

    async def upsert(self, address: str) -> WalletSubmission:
        """
        Insert the address or refresh its timestamp.

        Raises:
            InvalidAddressError: If address is malformed (nothing is written)
            StorageError: If the database call fails
        """
        canonical = normalize_address(address)
        stmt = self._upsert_statement(canonical, self._clock())
        try:
            async with self.engine.begin() as conn:
                row = (await conn.execute(stmt)).one()
        except SQLAlchemyError as e:
            raise StorageError(extract_error_message(e), operation="upsert") from e

        logger.debug("Recorded wallet submission for %s", canonical)
        return WalletSubmission(address=row.address, submitted_at=row.submitted_at)

    async def list_submissions(self) -> list[WalletSubmission]:
        """All submissions, newest first."""
        stmt = select(
            wallet_submissions.c.address,
            wallet_submissions.c.submitted_at,
        ).order_by(
            wallet_submissions.c.submitted_at.desc(),
            wallet_submissions.c.id.desc(),
        )
        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise StorageError(extract_error_message(e), operation="list") from e

        return [
            WalletSubmission(address=row.address, submitted_at=row.submitted_at)
            for row in rows
        ]


__all__ = [
    "metadata",
    "wallet_submissions",
    "utc_now",
    "extract_error_message",
    "init_schema",
    "SubmissionStore",
]
