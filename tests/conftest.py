"""
Pytest configuration and shared fixtures for cabal-mint tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_chain = importlib.import_module("fixtures.chain_fixtures")

# Extract factory functions
make_addresses = _common.make_addresses
make_allowlist = _common.make_allowlist
make_snapshot = _common.make_snapshot

FakeWeb3 = _chain.FakeWeb3


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def addresses():
    """Five deterministic lower-case addresses."""
    return make_addresses(5)


@pytest.fixture
def allowlist(addresses):
    """An AllowList over the default addresses."""
    return make_allowlist(addresses)


@pytest.fixture
def snapshot():
    """A PUBLIC-phase SaleSnapshot with launch prices."""
    return make_snapshot()


@pytest.fixture
def fake_w3():
    """A FakeWeb3 on the default chain with one funded account."""
    return FakeWeb3()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
