"""
Module 01 - Schemas
File: mint.py

Purpose: Sale configuration and wallet eligibility read from the
collection contract. These are plain value objects; the contract owns
every rule they describe.
"""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SaleState(IntEnum):
    """Sale phase as returned by the contract's ``saleState()`` (uint8)."""

    CLOSED = 0
    WHITELIST = 1
    PUBLIC = 2

    @classmethod
    def from_raw(cls, value: int) -> "SaleState":
        """Map the raw uint8; unknown values read as CLOSED."""
        try:
            return cls(int(value))
        except ValueError:
            return cls.CLOSED


class WalletMintStats(BaseModel):
    """Per-wallet counters from ``getWalletMintStats(address)``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    whitelist_minted: int = Field(default=0, ge=0)
    public_minted: int = Field(default=0, ge=0)
    free_minted: int = Field(default=0, ge=0)
    free_mint_allowance: int = Field(default=0, ge=0)
    holds_partner_token: bool = False

    @classmethod
    def from_tuple(cls, raw: tuple) -> "WalletMintStats":
        """Build from the ABI-decoded tuple, in declaration order."""
        whitelist_minted, public_minted, free_minted, allowance, partner = raw
        return cls(
            whitelist_minted=int(whitelist_minted),
            public_minted=int(public_minted),
            free_minted=int(free_minted),
            free_mint_allowance=int(allowance),
            holds_partner_token=bool(partner),
        )


class SaleSnapshot(BaseModel):
    """
    One consistent read of the contract's sale configuration.

    All fields come from the same refresh, so the view never mixes values
    from two different reads. Prices are in wei.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_supply: int = Field(default=0, ge=0)
    remaining_supply: int = Field(default=0, ge=0)
    max_supply: int = Field(default=0, ge=0)
    public_price_wei: int = Field(default=0, ge=0)
    whitelist_price_wei: int = Field(default=0, ge=0)
    sale_state: SaleState = SaleState.CLOSED
    free_mint_remaining: int = Field(default=0, ge=0)
    account: Optional[str] = None
    wallet_stats: Optional[WalletMintStats] = None
    owned_tokens: list[int] = Field(default_factory=list)

    @property
    def progress(self) -> float:
        """Minted fraction of max supply, in percent."""
        if self.max_supply <= 0:
            return 0.0
        return self.total_supply / self.max_supply * 100

    def unit_price_wei(self) -> int:
        """Price that applies to the current phase."""
        if self.sale_state is SaleState.WHITELIST:
            return self.whitelist_price_wei
        return self.public_price_wei


__all__ = [
    "SaleState",
    "WalletMintStats",
    "SaleSnapshot",
]
