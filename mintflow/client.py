"""
Sale snapshot reads.

Every read for a refresh is issued at once and awaited together, so a
snapshot never mixes values from two refreshes.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from web3 import Web3

from core.schemas.mint import SaleSnapshot
from mintflow.contract import MintContract


logger = logging.getLogger(__name__)


def format_ether(wei: int) -> str:
    """Render a wei amount in ether without trailing zeros."""
    value = Web3.from_wei(wei, "ether")
    if isinstance(value, Decimal):
        text = format(value.normalize(), "f")
    else:
        text = str(value)
    return text


class MintClient:
    """Reads sale configuration and wallet eligibility from the contract."""

    def __init__(self, contract: MintContract) -> None:
        self.contract = contract
        self.snapshot: Optional[SaleSnapshot] = None

    async def load_snapshot(self, account: Optional[str] = None) -> SaleSnapshot:
        """
        Read supply, prices, sale state and, with an account, wallet stats
        and owned tokens. Any failing read fails the whole refresh and the
        previous snapshot is kept.
        """
        c = self.contract
        reads = [
            c.total_supply(),
            c.remaining_supply(),
            c.max_supply(),
            c.public_price(),
            c.whitelist_price(),
            c.get_sale_state(),
            c.free_mint_remaining(),
        ]
        if account:
            reads.append(c.get_wallet_mint_stats(account))
            reads.append(c.wallet_of_owner(account))

        results = await asyncio.gather(*reads)
        (
            total_supply,
            remaining_supply,
            max_supply,
            public_price,
            whitelist_price,
            sale_state,
            free_remaining,
        ) = results[:7]
        wallet_stats = results[7] if account else None
        owned_tokens = results[8] if account else []

        snapshot = SaleSnapshot(
            total_supply=total_supply,
            remaining_supply=remaining_supply,
            max_supply=max_supply,
            public_price_wei=public_price,
            whitelist_price_wei=whitelist_price,
            sale_state=sale_state,
            free_mint_remaining=free_remaining,
            account=account,
            wallet_stats=wallet_stats,
            owned_tokens=owned_tokens,
        )
        self.snapshot = snapshot
        logger.debug(
            "Loaded snapshot: state=%s supply=%d/%d",
            sale_state.name,
            total_supply,
            max_supply,
        )
        return snapshot

    def estimated_cost(self, quantity: int, snapshot: Optional[SaleSnapshot] = None) -> int:
        """
        Cost in wei for ``quantity`` tokens at the current phase's price:
        the whitelist price during WHITELIST, the public price otherwise.
        """
        snap = snapshot or self.snapshot
        if snap is None:
            return 0
        return snap.unit_price_wei() * quantity


__all__ = ["MintClient", "format_ether"]
