"""
Wallet session.

An explicit context object for the connected wallet: account, chain,
balance, and the provider-derived objects built from them. Consumers
receive the session; nothing reaches for a global provider.

Provider absence (no RPC configured, node unreachable, no accounts) is a
normal disconnected state, not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from core.allowlist.address import format_address
from core.config.runtime import ChainConfig
from mintflow.client import format_ether
from mintflow.contract import LocalAccountSigner, MintContract, NodeSigner, TransactionSigner
from mintflow.errors import (
    UNRECOGNIZED_CHAIN_CODE,
    USER_REJECTED_CODE,
    WalletNotConnectedError,
    WrongNetworkError,
)


logger = logging.getLogger(__name__)


ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"
DISCONNECT = "disconnect"
EVENTS = (ACCOUNTS_CHANGED, CHAIN_CHANGED, DISCONNECT)


class ProviderRequestError(Exception):
    """A JSON-RPC request answered with an error object."""

    def __init__(self, code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class NetworkSwitchResult:
    ok: bool
    message: str = ""
    rejected: bool = False


class Subscription:
    """Handle returned by ``WalletSession.subscribe``."""

    def __init__(self, session: "WalletSession", event: str, callback: Callable[[Any], None]) -> None:
        self._session = session
        self.event = event
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        """Detach the callback. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._session._remove(self)


def parse_chain_id(value: Any) -> int:
    """Chain ids arrive as hex strings from wallets and as ints from nodes."""
    if isinstance(value, str):
        return int(value, 16)
    return int(value)


class WalletSession:
    """
    The connected wallet as seen by the mint flow.

    Usage:
        session = await WalletSession.connect(chain_config, private_key=key)
        if session.is_connected and session.is_correct_network:
            contract = session.mint_contract(chain_config.contract_address)
    """

    def __init__(
        self,
        chain: ChainConfig,
        w3: Optional[AsyncWeb3] = None,
        *,
        private_key: Optional[str] = None,
    ) -> None:
        self.chain = chain
        self.w3 = w3
        self._private_key = private_key
        self.account: Optional[str] = None
        self.chain_id: Optional[int] = None
        self.balance_wei: int = 0
        self._subscriptions: list[Subscription] = []
        self._signer: Optional[TransactionSigner] = None
        self._contracts: dict[str, MintContract] = {}
        self._owns_provider = False

    @classmethod
    async def connect(
        cls,
        chain: ChainConfig,
        w3: Optional[AsyncWeb3] = None,
        *,
        private_key: Optional[str] = None,
    ) -> "WalletSession":
        """
        Open a session against ``w3`` (or ``chain.rpc_url``).

        With a private key the session's account is the key's address;
        otherwise it is the node's first account, if any.
        """
        owns_provider = w3 is None and bool(chain.rpc_url)
        if owns_provider:
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(chain.rpc_url))
        session = cls(chain, w3, private_key=private_key)
        session._owns_provider = owns_provider
        if w3 is None:
            logger.info("No RPC provider configured; wallet session is disconnected")
            return session

        try:
            session.chain_id = int(await w3.eth.chain_id)
            if private_key:
                session._signer = LocalAccountSigner(w3, private_key)
                session.account = session._signer.address
            else:
                accounts = await w3.eth.accounts
                if accounts:
                    session.account = accounts[0]
            await session.refresh_balance()
        except (OSError, ValueError, Web3Exception) as e:
            # Unreachable or misbehaving provider
            logger.warning("Wallet provider unavailable: %s", e)
            session.disconnect(notify=False)
        return session

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self.account is not None

    @property
    def is_correct_network(self) -> bool:
        return self.chain_id == self.chain.chain_id

    def require_network(self) -> None:
        """
        Raises:
            WalletNotConnectedError: If no account is active
            WrongNetworkError: If the provider is on another chain
        """
        message = f"Please connect your wallet on the {self.chain.chain_name} network to mint."
        if not self.is_connected:
            raise WalletNotConnectedError(message)
        if not self.is_correct_network:
            raise WrongNetworkError(self.chain.chain_id, self.chain_id, message)

    @property
    def balance_ether(self) -> str:
        return format_ether(self.balance_wei)

    def format_address(self) -> str:
        return format_address(self.account)

    async def refresh_balance(self) -> int:
        if self.w3 is None or self.account is None:
            return self.balance_wei
        try:
            self.balance_wei = int(await self.w3.eth.get_balance(self.account))
        except (OSError, ValueError, Web3Exception) as e:
            logger.warning("Error updating balance: %s", e)
        return self.balance_wei

    def signer(self) -> Optional[TransactionSigner]:
        """Signer for the active account, built on first use."""
        if self.w3 is None or self.account is None:
            return None
        if self._signer is None:
            if self._private_key:
                self._signer = LocalAccountSigner(self.w3, self._private_key)
            else:
                self._signer = NodeSigner(self.w3, self.account)
        return self._signer

    def mint_contract(self, address: str) -> MintContract:
        """Contract client bound to this session's signer, cached per address."""
        if self.w3 is None:
            raise RuntimeError("No provider available for contract access")
        key = address.lower()
        if key not in self._contracts:
            self._contracts[key] = MintContract.at(self.w3, address, signer=self.signer())
        return self._contracts[key]

    def _invalidate(self) -> None:
        self._signer = None
        self._contracts.clear()
        self.balance_wei = 0

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, event: str, callback: Callable[[Any], None]) -> Subscription:
        if event not in EVENTS:
            raise ValueError(f"Unknown wallet event: {event}")
        subscription = Subscription(self, event, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _emit(self, event: str, payload: Any) -> None:
        for subscription in list(self._subscriptions):
            if subscription.event == event and subscription.active:
                subscription.callback(payload)

    def close(self) -> None:
        """Tear down every subscription."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    async def aclose(self) -> None:
        """Tear down subscriptions and release a provider this session opened."""
        self.close()
        if self._owns_provider and self.w3 is not None:
            await self.w3.provider.disconnect()
            self._owns_provider = False

    def disconnect(self, notify: bool = True) -> None:
        self.account = None
        self.chain_id = None
        self._invalidate()
        if notify:
            self._emit(DISCONNECT, None)

    def handle_accounts_changed(self, accounts: list[str]) -> None:
        """An empty list disconnects; otherwise the first account is active."""
        if not accounts:
            self.disconnect()
            return
        if self._private_key:
            logger.warning("Ignoring account change for a key-backed session")
            return
        self.account = accounts[0]
        self._invalidate()
        self._emit(ACCOUNTS_CHANGED, self.account)

    def handle_chain_changed(self, chain_id: Any) -> None:
        """
        Record the new chain and drop everything derived from the old one.

        Signer, contract clients and balance must be rebuilt afterwards.
        """
        self.chain_id = parse_chain_id(chain_id)
        self._invalidate()
        self._emit(CHAIN_CHANGED, self.chain_id)

    # ------------------------------------------------------------------
    # Network switching
    # ------------------------------------------------------------------

    async def _request(self, method: str, params: list[Any]) -> Any:
        if self.w3 is None:
            raise ProviderRequestError(None, "No wallet provider available")
        response = await self.w3.provider.make_request(method, params)
        error = response.get("error") if isinstance(response, dict) else None
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise ProviderRequestError(code, message)
        return response.get("result") if isinstance(response, dict) else response

    def network_params(self) -> dict[str, Any]:
        """``wallet_addEthereumChain`` parameters for the configured chain."""
        return {
            "chainId": self.chain.chain_id_hex,
            "chainName": self.chain.chain_name,
            "nativeCurrency": {
                "name": self.chain.native_symbol,
                "symbol": self.chain.native_symbol,
                "decimals": self.chain.native_decimals,
            },
            "rpcUrls": [u for u in [self.chain.rpc_url] if u],
            "blockExplorerUrls": [u for u in [self.chain.explorer_url] if u],
        }

    async def ensure_network(self) -> NetworkSwitchResult:
        """
        Ask the wallet to switch to the configured chain.

        Unknown chain (4902) falls back to adding it and switching again.
        A user rejection (4001) is reported in the result, not raised.
        """
        if self.is_correct_network:
            return NetworkSwitchResult(ok=True)

        switch_params = [{"chainId": self.chain.chain_id_hex}]
        try:
            await self._request("wallet_switchEthereumChain", switch_params)
        except ProviderRequestError as e:
            if e.code == USER_REJECTED_CODE:
                logger.warning("User rejected the network switch request")
                return NetworkSwitchResult(ok=False, message="Network switch rejected", rejected=True)
            if e.code != UNRECOGNIZED_CHAIN_CODE:
                logger.error("Error switching network: %s", e.message)
                return NetworkSwitchResult(ok=False, message=f"Failed to switch to {self.chain.chain_name}")
            try:
                await self._request("wallet_addEthereumChain", [self.network_params()])
                await self._request("wallet_switchEthereumChain", switch_params)
            except ProviderRequestError as add_error:
                logger.error("Error adding network: %s", add_error.message)
                return NetworkSwitchResult(ok=False, message=f"Failed to add the {self.chain.chain_name} network")

        self.handle_chain_changed(self.chain.chain_id)
        await self.refresh_balance()
        return NetworkSwitchResult(ok=True)


__all__ = [
    "ACCOUNTS_CHANGED",
    "CHAIN_CHANGED",
    "DISCONNECT",
    "ProviderRequestError",
    "NetworkSwitchResult",
    "Subscription",
    "WalletSession",
    "parse_chain_id",
]
