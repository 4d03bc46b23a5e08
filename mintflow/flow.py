"""
Mint flow state machine.

    idle -> preparing -> submitted(tx hash) -> confirmed
                  \\              \\
                   -> errored     -> errored

``confirmed`` and ``errored`` fall back to ``idle`` after a fixed delay.
Listeners see every transition. Guards that fail produce ``errored``
without touching the chain.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from core.schemas.mint import SaleSnapshot, SaleState
from mintflow.client import MintClient
from mintflow.errors import MintError, describe_chain_error
from mintflow.minting_config import MintingConfig
from mintflow.phases import MAX_MINT_PER_TX
from mintflow.wallet import ACCOUNTS_CHANGED, CHAIN_CHANGED, DISCONNECT, WalletSession


logger = logging.getLogger(__name__)


class MintStatus(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    ERRORED = "errored"


class MintKind(str, Enum):
    PUBLIC = "public"
    WHITELIST = "whitelist"
    FREE = "free"


@dataclass(frozen=True)
class MintState:
    status: MintStatus = MintStatus.IDLE
    message: str = ""
    tx_hash: Optional[str] = None
    kind: Optional[MintKind] = None
    quantity: int = 0

    @property
    def busy(self) -> bool:
        return self.status in (MintStatus.PREPARING, MintStatus.SUBMITTED)


IDLE = MintState()

_CONFIRMED_MESSAGES = {
    MintKind.PUBLIC: "Mint confirmed. Your NFT reveal will follow shortly.",
    MintKind.WHITELIST: "Whitelist mint confirmed.",
    MintKind.FREE: "Free mint confirmed.",
}

_PREPARING_MESSAGES = {
    MintKind.PUBLIC: "Preparing mint transaction...",
    MintKind.WHITELIST: "Preparing whitelist mint...",
    MintKind.FREE: "Submitting free mint...",
}


def clamp_quantity(value: Any, maximum: int = MAX_MINT_PER_TX) -> int:
    """
    Quantity the user may mint in one transaction.

    Non-numeric input becomes 1; anything else is floored and clamped to
    ``[1, maximum]``.
    """
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 1
    if math.isnan(numeric):
        return 1
    if math.isinf(numeric):
        return maximum if numeric > 0 else 1
    return min(maximum, max(1, math.floor(numeric)))


class MintFlow:
    """
    Runs public, whitelist and free mints against a wallet session.

    Usage:
        flow = MintFlow(session, contract_address, minting_config)
        flow.subscribe(lambda state: print(state.status, state.message))
        await flow.refresh()
        await flow.mint(MintKind.WHITELIST, 2)
    """

    def __init__(
        self,
        session: WalletSession,
        contract_address: str,
        minting_config: Optional[MintingConfig] = None,
        *,
        reset_after_s: float = 5.0,
        max_quantity: int = MAX_MINT_PER_TX,
    ) -> None:
        self.session = session
        self.contract_address = contract_address
        self.minting_config = minting_config or MintingConfig()
        self.reset_after_s = reset_after_s
        self.max_quantity = max_quantity
        self.snapshot: Optional[SaleSnapshot] = None
        self._state = IDLE
        self._listeners: list[Callable[[MintState], None]] = []
        self._client: Optional[MintClient] = None
        self._reset_handle: Optional[asyncio.TimerHandle] = None
        self._in_flight = False
        self._session_subscriptions = [
            session.subscribe(event, self._on_session_change)
            for event in (ACCOUNTS_CHANGED, CHAIN_CHANGED, DISCONNECT)
        ]

    # ------------------------------------------------------------------
    # State and listeners
    # ------------------------------------------------------------------

    @property
    def state(self) -> MintState:
        return self._state

    def subscribe(self, listener: Callable[[MintState], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: MintState) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

        self._state = state
        logger.debug("Mint state -> %s %s", state.status.value, state.message)
        for listener in list(self._listeners):
            listener(state)

        if state.status in (MintStatus.CONFIRMED, MintStatus.ERRORED):
            self._schedule_reset(state)

    def _schedule_reset(self, state: MintState) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._reset_handle = loop.call_later(self.reset_after_s, self._reset_if_current, state)

    def _reset_if_current(self, state: MintState) -> None:
        self._reset_handle = None
        if self._state is state:
            self._transition(IDLE)

    def _on_session_change(self, _payload: Any) -> None:
        # Provider-derived objects are rebuilt on next use
        self._client = None
        self.snapshot = None

    def close(self) -> None:
        for subscription in self._session_subscriptions:
            subscription.unsubscribe()
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def client(self) -> MintClient:
        if self._client is None:
            self._client = MintClient(self.session.mint_contract(self.contract_address))
        return self._client

    async def refresh(self) -> SaleSnapshot:
        self.snapshot = await self.client.load_snapshot(self.session.account)
        return self.snapshot

    # ------------------------------------------------------------------
    # Mint
    # ------------------------------------------------------------------

    def _fail(self, kind: MintKind, message: str) -> MintState:
        self._transition(MintState(status=MintStatus.ERRORED, message=message, kind=kind))
        return self._state

    def _check_guards(self, kind: MintKind, quantity: int, snapshot: SaleSnapshot) -> tuple[Optional[str], int, list[str]]:
        """Returns (error message or None, effective quantity, proof)."""
        account = self.session.account

        if kind is MintKind.PUBLIC:
            if snapshot.sale_state is not SaleState.PUBLIC:
                return "Public mint is not active right now.", quantity, []
            return None, quantity, []

        if kind is MintKind.WHITELIST:
            if snapshot.sale_state is not SaleState.WHITELIST:
                return "Whitelist mint is not active right now.", quantity, []
            proof = self.minting_config.proof_for("whitelist", account)
            if not proof:
                return "Merkle proof missing. Update config/mintingConfig.json for this wallet.", quantity, []
            return None, quantity, proof

        proof = self.minting_config.proof_for("freeMint", account)
        if not proof:
            return "Free mint proof missing. Update config/mintingConfig.json for this wallet.", quantity, []
        stats = snapshot.wallet_stats
        if stats is None or stats.free_mint_allowance == 0:
            return "You have no free mint allowance left.", quantity, []
        # The contract enforces the allowance; clamping here avoids a revert
        return None, min(quantity, stats.free_mint_allowance), proof

    async def mint(self, kind: MintKind | str, quantity: Any = 1) -> MintState:
        """
        Run one mint to completion and return the final state.

        A mint already in flight is left alone and its state returned. The
        flow counts as in flight from the moment this is called, before any
        read has been awaited.
        """
        kind = MintKind(kind)
        if self._in_flight or self._state.busy:
            logger.warning("Mint already in progress; ignoring %s request", kind.value)
            return self._state

        self._in_flight = True
        try:
            return await self._run_mint(kind, quantity)
        finally:
            self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def _run_mint(self, kind: MintKind, quantity: Any) -> MintState:
        quantity = clamp_quantity(quantity, self.max_quantity)

        try:
            self.session.require_network()
        except MintError as e:
            return self._fail(kind, e.message)

        try:
            snapshot = self.snapshot or await self.refresh()
        except Exception as e:
            logger.error("Error loading contract data: %s", e, exc_info=True)
            return self._fail(kind, f"Error: {describe_chain_error(e)}")

        message, quantity, proof = self._check_guards(kind, quantity, snapshot)
        if message:
            return self._fail(kind, message)

        contract = self.client.contract
        try:
            self._transition(MintState(
                status=MintStatus.PREPARING,
                message=_PREPARING_MESSAGES[kind],
                kind=kind,
                quantity=quantity,
            ))
            if kind is MintKind.PUBLIC:
                tx_hash = await contract.public_mint(quantity)
            elif kind is MintKind.WHITELIST:
                tx_hash = await contract.whitelist_mint(quantity, proof)
            else:
                tx_hash = await contract.free_mint(quantity, proof)

            self._transition(MintState(
                status=MintStatus.SUBMITTED,
                message="Transaction submitted. Waiting for confirmation...",
                tx_hash=tx_hash,
                kind=kind,
                quantity=quantity,
            ))
            await contract.wait_for_receipt(tx_hash)
        except Exception as e:
            logger.error("Minting error: %s", e, exc_info=True)
            return self._fail(kind, f"Error: {describe_chain_error(e)}")

        try:
            await self.refresh()
        except Exception as e:
            logger.error("Error reloading contract data: %s", e)

        self._transition(MintState(
            status=MintStatus.CONFIRMED,
            message=_CONFIRMED_MESSAGES[kind],
            tx_hash=tx_hash,
            kind=kind,
            quantity=quantity,
        ))
        return self._state


__all__ = [
    "MintStatus",
    "MintKind",
    "MintState",
    "IDLE",
    "clamp_quantity",
    "MintFlow",
]
