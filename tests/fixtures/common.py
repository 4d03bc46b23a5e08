"""
Common test fixtures shared by all modules.

Provides factory functions for core data structures:
- addresses and allow-lists
- SaleSnapshot / WalletMintStats
- MintingConfig documents

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Optional, Sequence

from core.allowlist import AllowList
from core.schemas.mint import SaleSnapshot, SaleState, WalletMintStats
from mintflow.minting_config import MintingConfig


# Valid key (well below the curve order) used wherever a local signer is needed
TEST_PRIVATE_KEY = "0x" + "11" * 32

CONTRACT_ADDRESS = "0x" + "c0" * 20


# =============================================================================
# Addresses
# =============================================================================

def make_address(i: int) -> str:
    """Deterministic lower-case address for index ``i``."""
    return "0x" + f"{i:040x}"


def make_addresses(n: int, start: int = 1) -> list[str]:
    return [make_address(i) for i in range(start, start + n)]


def make_allowlist(addresses: Optional[Sequence[str]] = None) -> AllowList:
    return AllowList.build(addresses if addresses is not None else make_addresses(5))


# =============================================================================
# Snapshot Factories
# =============================================================================

def make_wallet_stats(
    free_mint_allowance: int = 0,
    whitelist_minted: int = 0,
    public_minted: int = 0,
    free_minted: int = 0,
    holds_partner_token: bool = False,
) -> WalletMintStats:
    return WalletMintStats(
        whitelist_minted=whitelist_minted,
        public_minted=public_minted,
        free_minted=free_minted,
        free_mint_allowance=free_mint_allowance,
        holds_partner_token=holds_partner_token,
    )


def make_snapshot(
    sale_state: SaleState = SaleState.PUBLIC,
    account: Optional[str] = None,
    wallet_stats: Optional[WalletMintStats] = None,
    total_supply: int = 100,
    max_supply: int = 1000,
    public_price_wei: int = 40_000_000_000_000_000,
    whitelist_price_wei: int = 20_000_000_000_000_000,
) -> SaleSnapshot:
    """
    Create a SaleSnapshot for testing.

    Defaults mirror the launch configuration: 0.04 ETH public and 0.02 ETH
    whitelist.
    """
    return SaleSnapshot(
        total_supply=total_supply,
        remaining_supply=max_supply - total_supply,
        max_supply=max_supply,
        public_price_wei=public_price_wei,
        whitelist_price_wei=whitelist_price_wei,
        sale_state=sale_state,
        free_mint_remaining=50,
        account=account,
        wallet_stats=wallet_stats,
        owned_tokens=[],
    )


# =============================================================================
# Minting Config Factory
# =============================================================================

def make_minting_config(
    whitelist: Optional[Sequence[str]] = None,
    free_mint: Optional[Sequence[str]] = None,
    contract_address: Optional[str] = CONTRACT_ADDRESS,
) -> MintingConfig:
    """MintingConfig with the given wallets on each list (proofs built for real)."""
    config = MintingConfig.model_validate({"contract": {"address": contract_address}})
    if whitelist:
        config = config.with_allowlist("whitelist", AllowList.build(whitelist))
    if free_mint:
        config = config.with_allowlist("freeMint", AllowList.build(free_mint))
    return config
