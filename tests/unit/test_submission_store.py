"""
Wallet Submission Store Tests
Tests for core/storage/submissions.py against SQLite (aiosqlite).

Tests:
1. Upsert normalizes and inserts
2. Resubmission keeps one row and refreshes the timestamp
3. Listing is newest first
4. Invalid addresses never reach the database
5. Database failures surface as StorageError
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from core.config.runtime import DatabaseConfig
from core.schemas.errors import ErrorCodes, InvalidAddressError, StorageError
from core.storage import (
    SubmissionStore,
    create_engine_from_config,
    extract_error_message,
    init_schema,
    wallet_submissions,
)


A1 = "0x" + "aa" * 20
A2 = "0x" + "bb" * 20
A3 = "0x" + "cc" * 20


class StepClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 10, 22, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


def _run_with_store(tmp_path, scenario, clock=None):
    async def _main():
        engine = create_engine_from_config(
            DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path}/submissions.db")
        )
        try:
            await init_schema(engine)
            store = SubmissionStore(engine, clock=clock or StepClock())
            return await scenario(store, engine)
        finally:
            await engine.dispose()

    return asyncio.run(_main())


async def _count_rows(engine) -> int:
    async with engine.connect() as conn:
        result = await conn.execute(select(func.count()).select_from(wallet_submissions))
        return result.scalar_one()


class TestUpsert:
    """Tests for SubmissionStore.upsert()."""

    def test_insert_normalizes(self, tmp_path):
        async def scenario(store, engine):
            return await store.upsert("  0x" + "AA" * 20 + " ")

        record = _run_with_store(tmp_path, scenario)
        assert record.address == A1
        assert record.submitted_at == datetime(2025, 10, 22, 12, 0, tzinfo=timezone.utc)

    def test_resubmission_keeps_single_row(self, tmp_path):
        async def scenario(store, engine):
            first = await store.upsert(A1)
            second = await store.upsert(A1.upper().replace("0X", "0x"))
            return first, second, await _count_rows(engine)

        first, second, count = _run_with_store(tmp_path, scenario)
        assert count == 1
        assert second.address == first.address
        assert second.submitted_at > first.submitted_at

    def test_invalid_address_rejected_before_write(self, tmp_path):
        async def scenario(store, engine):
            with pytest.raises(InvalidAddressError):
                await store.upsert("0x1234")
            return await _count_rows(engine)

        assert _run_with_store(tmp_path, scenario) == 0

    def test_database_failure_is_storage_error(self, tmp_path):
        async def scenario(store, engine):
            async with engine.begin() as conn:
                await conn.run_sync(wallet_submissions.drop)
            with pytest.raises(StorageError) as exc_info:
                await store.upsert(A1)
            return exc_info.value

        error = _run_with_store(tmp_path, scenario)
        assert error.code == ErrorCodes.STORAGE_ERROR
        assert error.details["operation"] == "upsert"
        assert error.retryable


class TestListSubmissions:
    """Tests for SubmissionStore.list_submissions()."""

    def test_empty(self, tmp_path):
        async def scenario(store, engine):
            return await store.list_submissions()

        assert _run_with_store(tmp_path, scenario) == []

    def test_newest_first(self, tmp_path):
        async def scenario(store, engine):
            await store.upsert(A1)
            await store.upsert(A2)
            await store.upsert(A3)
            return await store.list_submissions()

        records = _run_with_store(tmp_path, scenario)
        assert [r.address for r in records] == [A3, A2, A1]

    def test_resubmission_moves_to_top(self, tmp_path):
        async def scenario(store, engine):
            await store.upsert(A1)
            await store.upsert(A2)
            await store.upsert(A1)
            return await store.list_submissions()

        records = _run_with_store(tmp_path, scenario)
        assert [r.address for r in records] == [A1, A2]
        assert all(r.submitted_at.tzinfo is not None for r in records)

    def test_to_api_shape(self, tmp_path):
        async def scenario(store, engine):
            await store.upsert(A1)
            return await store.list_submissions()

        (record,) = _run_with_store(tmp_path, scenario)
        assert record.to_api() == {
            "address": A1,
            "submittedAt": "2025-10-22T12:00:00+00:00",
        }


class TestInitSchema:
    """Tests for init_schema()."""

    def test_idempotent(self, tmp_path):
        async def scenario(store, engine):
            await init_schema(engine)
            await init_schema(engine)
            return await _count_rows(engine)

        assert _run_with_store(tmp_path, scenario) == 0


class TestExtractErrorMessage:
    """Tests for extract_error_message()."""

    def test_prefers_detail(self):
        class DriverError(Exception):
            detail = "Key (address) already exists"

        assert extract_error_message(DriverError("ignored")) == "Key (address) already exists"

    def test_follows_orig(self):
        class Wrapped(Exception):
            def __init__(self, orig):
                super().__init__("wrapper")
                self.orig = orig

        assert extract_error_message(Wrapped(ValueError("inner"))) == "inner"

    def test_message_attribute(self):
        class WithMessage(Exception):
            message = "from message"

        assert extract_error_message(WithMessage()) == "from message"

    def test_falls_back_to_str_or_type(self):
        assert extract_error_message(RuntimeError("boom")) == "boom"
        assert extract_error_message(RuntimeError()) == "RuntimeError"
        assert extract_error_message("plain") == "plain"
