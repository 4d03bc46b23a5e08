"""
Module 09C - CLI Status Command

Print one sale snapshot from the contract.

Usage:
    cabal status [--account 0xabc...] [--json]
"""

from __future__ import annotations

import asyncio
import json
import sys
from argparse import Namespace
from typing import Any, Optional

from web3 import AsyncWeb3

from cabal_cli.commands.mint import load_minting_config, resolve_contract_address
from core.config.runtime import RuntimeConfig
from core.schemas.mint import SaleSnapshot
from mintflow.client import MintClient, format_ether
from mintflow.contract import MintContract


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def snapshot_to_dict(snapshot: SaleSnapshot) -> dict[str, Any]:
    data = snapshot.model_dump(mode="json")
    data["sale_state"] = snapshot.sale_state.name
    data["public_price_eth"] = format_ether(snapshot.public_price_wei)
    data["whitelist_price_eth"] = format_ether(snapshot.whitelist_price_wei)
    data["progress_pct"] = round(snapshot.progress, 2)
    return data


def print_snapshot_human(snapshot: SaleSnapshot) -> None:
    print(f"Sale state:        {snapshot.sale_state.name}")
    print(f"Minted:            {snapshot.total_supply} / {snapshot.max_supply} ({snapshot.progress:.1f}%)")
    print(f"Remaining:         {snapshot.remaining_supply}")
    print(f"Public price:      {format_ether(snapshot.public_price_wei)} ETH")
    print(f"Whitelist price:   {format_ether(snapshot.whitelist_price_wei)} ETH")
    print(f"Free mints left:   {snapshot.free_mint_remaining}")
    if snapshot.account and snapshot.wallet_stats:
        stats = snapshot.wallet_stats
        print(f"\nWallet {snapshot.account}:")
        print(f"  whitelist minted:   {stats.whitelist_minted}")
        print(f"  public minted:      {stats.public_minted}")
        print(f"  free minted:        {stats.free_minted}")
        print(f"  free allowance:     {stats.free_mint_allowance}")
        print(f"  partner holder:     {'yes' if stats.holds_partner_token else 'no'}")
        tokens = ", ".join(str(t) for t in snapshot.owned_tokens) or "(none)"
        print(f"  tokens:             {tokens}")


async def load_status(runtime: RuntimeConfig, account: Optional[str]) -> SaleSnapshot:
    address = resolve_contract_address(runtime, load_minting_config(runtime))
    if not address:
        raise ValueError("No contract address configured (CABAL_CONTRACT_ADDRESS)")
    if not runtime.chain.rpc_url:
        raise ValueError("No RPC endpoint configured (CABAL_RPC_URL)")
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(runtime.chain.rpc_url))
    try:
        client = MintClient(MintContract.at(w3, address))
        return await client.load_snapshot(account)
    finally:
        await w3.provider.disconnect()


def status_cmd(args: Namespace) -> int:
    """Handle ``status``."""
    runtime: RuntimeConfig = args.cli_config.runtime
    try:
        snapshot = asyncio.run(load_status(runtime, args.account))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(snapshot_to_dict(snapshot), indent=2))
    else:
        print_snapshot_human(snapshot)
    return EXIT_SUCCESS
