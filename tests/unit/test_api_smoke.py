"""
Module 09D - API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /api/wallet-submissions normalizes and stores
3. Resubmission keeps one row and refreshes the timestamp
4. Malformed address / body returns 400 and writes nothing
5. Storage failure returns 500 with a generic message
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.deps import get_submission_store
from core.config.runtime import DatabaseConfig, RuntimeConfig, ServerConfig
from core.schemas.errors import ErrorCodes, StorageError


MIXED = "0xABCDEF0123456789ABCDEF0123456789ABCDEF01"
LOWER = "0xabcdef0123456789abcdef0123456789abcdef01"
OTHER = "0x" + "12" * 20


def _config(tmp_path, **server) -> RuntimeConfig:
    return RuntimeConfig(
        database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path}/api.db"),
        server=ServerConfig(**server),
    )


@pytest.fixture
def client(tmp_path):
    app = create_app(_config(tmp_path))
    with TestClient(app) as test_client:
        yield test_client


class FailingStore:
    """Store double whose every call fails like a dropped connection."""

    async def upsert(self, address):
        raise StorageError("connection refused to db.internal:5432", operation="upsert")

    async def list_submissions(self):
        raise StorageError("connection refused to db.internal:5432", operation="list")


def _failing_client(tmp_path, **server) -> TestClient:
    app = create_app(_config(tmp_path, **server))
    app.dependency_overrides[get_submission_store] = lambda: FailingStore()
    return TestClient(app)


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Liveness endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "cabal-wallet-api"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["ok"] is True


# =============================================================================
# Wallet submissions
# =============================================================================

class TestSubmitWallet:
    """POST /api/wallet-submissions."""

    def test_normalizes_address(self, client):
        response = client.post("/api/wallet-submissions", json={"address": MIXED})

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["address"] == LOWER
        assert data["submittedAt"]

    def test_extra_fields_ignored(self, client):
        response = client.post(
            "/api/wallet-submissions",
            json={
                "address": LOWER,
                "source": "landing-join-footer",
                "submittedAt": "2025-10-22T12:00:00.000Z",
            },
        )
        assert response.status_code == 200

    def test_resubmission_keeps_one_row(self, client):
        first = client.post("/api/wallet-submissions", json={"address": MIXED}).json()
        second = client.post("/api/wallet-submissions", json={"address": LOWER}).json()

        listing = client.get("/api/wallet-submissions").json()["submissions"]
        assert [s["address"] for s in listing] == [LOWER]
        assert datetime.fromisoformat(second["submittedAt"]) >= datetime.fromisoformat(first["submittedAt"])

    @pytest.mark.parametrize(
        "body",
        [
            {"address": "0x1234"},
            {"address": "abcdef0123456789abcdef0123456789abcdef01"},
            {"address": 12345},
            {"address": None},
            {},
            ["0xabcdef0123456789abcdef0123456789abcdef01"],
        ],
    )
    def test_invalid_address_is_400(self, client, body):
        response = client.post("/api/wallet-submissions", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["ok"] is False
        assert data["error"] == "A valid wallet address is required"

        assert client.get("/api/wallet-submissions").json()["submissions"] == []

    def test_malformed_json_is_400(self, client):
        response = client.post(
            "/api/wallet-submissions",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["ok"] is False


class TestListWallets:
    """GET /api/wallet-submissions."""

    def test_empty(self, client):
        response = client.get("/api/wallet-submissions")
        assert response.status_code == 200
        assert response.json() == {"submissions": []}

    def test_contains_submitted(self, client):
        client.post("/api/wallet-submissions", json={"address": LOWER})
        client.post("/api/wallet-submissions", json={"address": OTHER})

        submissions = client.get("/api/wallet-submissions").json()["submissions"]
        assert {s["address"] for s in submissions} == {LOWER, OTHER}
        assert all(set(s) == {"address", "submittedAt"} for s in submissions)


class TestStorageFailures:
    """Storage errors become 500 responses."""

    def test_submit_failure_is_generic(self, tmp_path):
        with _failing_client(tmp_path) as client:
            response = client.post("/api/wallet-submissions", json={"address": LOWER})

        assert response.status_code == 500
        data = response.json()
        assert data["ok"] is False
        assert data["code"] == ErrorCodes.STORAGE_ERROR
        assert "db.internal" not in data["error"]

    def test_list_failure_is_generic(self, tmp_path):
        with _failing_client(tmp_path) as client:
            response = client.get("/api/wallet-submissions")

        assert response.status_code == 500
        assert response.json()["error"] == "Unable to load wallet submissions"

    def test_exposed_in_development(self, tmp_path):
        with _failing_client(tmp_path, expose_storage_errors=True) as client:
            response = client.post("/api/wallet-submissions", json={"address": LOWER})

        assert response.status_code == 500
        assert "connection refused" in response.json()["error"]

    def test_invalid_address_checked_before_store(self, tmp_path):
        with _failing_client(tmp_path) as client:
            response = client.post("/api/wallet-submissions", json={"address": "nope"})
        assert response.status_code == 400
