"""
Test fixtures package for cabal-mint tests.

This package provides factory functions and doubles for creating test objects.
Organized into layers:
- common.py: Base factories (addresses, allow-lists, snapshots, minting config)
- chain_fixtures.py: In-process web3 doubles for contract and wallet tests

Usage:
    from fixtures import make_addresses, FakeWeb3

    def test_something():
        w3 = FakeWeb3()
        addresses = make_addresses(3)
"""

from .common import (
    CONTRACT_ADDRESS,
    TEST_PRIVATE_KEY,
    make_address,
    make_addresses,
    make_allowlist,
    make_minting_config,
    make_snapshot,
    make_wallet_stats,
)

from .chain_fixtures import (
    TEST_CHAIN_ID,
    FakeContract,
    FakeProvider,
    FakeWeb3,
    rpc_error,
)

__all__ = [
    # Common
    "CONTRACT_ADDRESS",
    "TEST_PRIVATE_KEY",
    "make_address",
    "make_addresses",
    "make_allowlist",
    "make_minting_config",
    "make_snapshot",
    "make_wallet_stats",
    # Chain
    "TEST_CHAIN_ID",
    "FakeContract",
    "FakeProvider",
    "FakeWeb3",
    "rpc_error",
]
