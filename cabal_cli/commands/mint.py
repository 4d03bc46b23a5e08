"""
Module 09C - CLI Mint Command

Mint from the command line with a local key (CABAL_PRIVATE_KEY). Runs the
same state machine the web flow uses and prints each transition.

Usage:
    cabal mint public --quantity 2
    cabal mint whitelist --quantity 1
    cabal mint free --quantity 3
"""

from __future__ import annotations

import asyncio
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from mintflow.flow import MintFlow, MintKind, MintState, MintStatus
from mintflow.minting_config import MintingConfig
from mintflow.wallet import WalletSession


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_minting_config(runtime: RuntimeConfig) -> MintingConfig:
    """mintingConfig.json from the configured path, or an empty config."""
    path = runtime.chain.minting_config
    if path and Path(path).exists():
        return MintingConfig.load(path)
    if path:
        logger.warning("Minting config %s not found; proofs unavailable", path)
    return MintingConfig()


def resolve_contract_address(runtime: RuntimeConfig, minting_config: MintingConfig) -> Optional[str]:
    return runtime.chain.contract_address or minting_config.contract.address


def print_transition(state: MintState) -> None:
    line = f"[{state.status.value}] {state.message}".rstrip()
    if state.tx_hash and state.status is MintStatus.SUBMITTED:
        line += f" ({state.tx_hash})"
    print(line)


async def run_mint(runtime: RuntimeConfig, kind: MintKind, quantity: int) -> MintState:
    minting_config = load_minting_config(runtime)
    address = resolve_contract_address(runtime, minting_config)
    if not address:
        raise ValueError("No contract address configured (CABAL_CONTRACT_ADDRESS)")

    session = await WalletSession.connect(runtime.chain, private_key=runtime.chain.private_key)
    flow = MintFlow(
        session,
        address,
        minting_config,
        reset_after_s=runtime.client.status_reset_s,
        max_quantity=runtime.client.max_quantity,
    )
    flow.subscribe(print_transition)
    try:
        state = await flow.mint(kind, quantity)
        if state.status is MintStatus.CONFIRMED and runtime.chain.explorer_url and state.tx_hash:
            print(f"{runtime.chain.explorer_url.rstrip('/')}/tx/{state.tx_hash}")
        return state
    finally:
        flow.close()
        await session.aclose()


def mint_cmd(args: Namespace) -> int:
    """Handle ``mint {public|whitelist|free}``."""
    runtime: RuntimeConfig = args.cli_config.runtime
    if not runtime.chain.private_key:
        print("Error: CABAL_PRIVATE_KEY is required to mint from the CLI", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        state = asyncio.run(run_mint(runtime, MintKind(args.kind), args.quantity))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    return EXIT_SUCCESS if state.status is MintStatus.CONFIRMED else EXIT_RUNTIME_ERROR
