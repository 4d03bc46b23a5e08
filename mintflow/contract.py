"""
Contract client for the collection's mint surface.

Wraps a web3.py ``AsyncContract``. Reads are plain async calls; writes
estimate gas for the exact call, pad the estimate by 10%, and hand the
built transaction to a signer.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from eth_account import Account
from web3 import AsyncWeb3, Web3

from core.schemas.mint import SaleState, WalletMintStats
from mintflow.errors import (
    USER_REJECTED_CODE,
    TransactionRevertedError,
    UserRejectedError,
    WalletNotConnectedError,
    chain_error_code,
)


logger = logging.getLogger(__name__)


GAS_LIMIT_NUMERATOR = 110
GAS_LIMIT_DENOMINATOR = 100
RECEIPT_TIMEOUT_S = 240


def _fn(name: str, inputs: list[tuple[str, str]], outputs: list[tuple[str, str]], mutability: str) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


MINT_ABI: list[dict[str, Any]] = [
    _fn("publicMint", [("quantity", "uint256")], [], "payable"),
    _fn("whitelistMint", [("quantity", "uint256"), ("merkleProof", "bytes32[]")], [], "payable"),
    _fn("freeMint", [("quantity", "uint256"), ("merkleProof", "bytes32[]")], [], "nonpayable"),
    _fn("saleState", [], [("", "uint8")], "view"),
    _fn("publicPrice", [], [("", "uint256")], "view"),
    _fn("whitelistPrice", [], [("", "uint256")], "view"),
    _fn("remainingSupply", [], [("", "uint256")], "view"),
    _fn("totalSupply", [], [("", "uint256")], "view"),
    _fn("MAX_SUPPLY", [], [("", "uint256")], "view"),
    _fn("freeMintRemaining", [], [("", "uint256")], "view"),
    _fn(
        "getWalletMintStats",
        [("account", "address")],
        [
            ("whitelistMinted", "uint256"),
            ("publicMinted", "uint256"),
            ("freeMinted", "uint256"),
            ("freeMintAllowance", "uint256"),
            ("holdsPartnerToken", "bool"),
        ],
        "view",
    ),
    _fn("walletOfOwner", [("owner", "address")], [("", "uint256[]")], "view"),
]


def padded_gas_limit(estimate: int) -> int:
    """Gas limit sent with a mint: the estimate plus 10%, integer math."""
    return int(estimate) * GAS_LIMIT_NUMERATOR // GAS_LIMIT_DENOMINATOR


class TransactionSigner(Protocol):
    """Something that can put a built transaction on chain."""

    address: str

    async def send(self, transaction: dict[str, Any]) -> str:
        """Submit and return the transaction hash as 0x-hex."""
        ...


class NodeSigner:
    """
    Signs through the connected node (``eth_sendTransaction``).

    For providers that manage the account, such as a browser wallet bridge
    or a development node with unlocked accounts.
    """

    def __init__(self, w3: AsyncWeb3, address: str) -> None:
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

    async def send(self, transaction: dict[str, Any]) -> str:
        tx_hash = await self.w3.eth.send_transaction(transaction)
        return Web3.to_hex(tx_hash)


class LocalAccountSigner:
    """Signs locally with a private key and sends the raw transaction."""

    def __init__(self, w3: AsyncWeb3, private_key: str) -> None:
        self.w3 = w3
        self._account = Account.from_key(private_key)
        self.address = self._account.address

    async def send(self, transaction: dict[str, Any]) -> str:
        tx = dict(transaction)
        if "nonce" not in tx:
            tx["nonce"] = await self.w3.eth.get_transaction_count(self.address, "pending")
        signed = self._account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)


class MintContract:
    """
    Typed access to the collection contract.

    Usage:
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        contract = MintContract.at(w3, address, signer=LocalAccountSigner(w3, key))
        state = await contract.get_sale_state()
        tx_hash = await contract.public_mint(2)
        await contract.wait_for_receipt(tx_hash)
    """

    def __init__(
        self,
        contract: Any,
        w3: Optional[AsyncWeb3] = None,
        signer: Optional[TransactionSigner] = None,
    ) -> None:
        self.contract = contract
        self.w3 = w3
        self.signer = signer

    @classmethod
    def at(
        cls,
        w3: AsyncWeb3,
        address: str,
        signer: Optional[TransactionSigner] = None,
    ) -> "MintContract":
        contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=MINT_ABI)
        return cls(contract, w3=w3, signer=signer)

    @property
    def address(self) -> str:
        return self.contract.address

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def total_supply(self) -> int:
        return int(await self.contract.functions.totalSupply().call())

    async def max_supply(self) -> int:
        return int(await self.contract.functions.MAX_SUPPLY().call())

    async def remaining_supply(self) -> int:
        return int(await self.contract.functions.remainingSupply().call())

    async def free_mint_remaining(self) -> int:
        return int(await self.contract.functions.freeMintRemaining().call())

    async def public_price(self) -> int:
        return int(await self.contract.functions.publicPrice().call())

    async def whitelist_price(self) -> int:
        return int(await self.contract.functions.whitelistPrice().call())

    async def get_sale_state(self) -> SaleState:
        raw = await self.contract.functions.saleState().call()
        return SaleState.from_raw(raw)

    async def get_wallet_mint_stats(self, account: str) -> WalletMintStats:
        raw = await self.contract.functions.getWalletMintStats(
            Web3.to_checksum_address(account)
        ).call()
        return WalletMintStats.from_tuple(tuple(raw))

    async def wallet_of_owner(self, account: str) -> list[int]:
        raw = await self.contract.functions.walletOfOwner(
            Web3.to_checksum_address(account)
        ).call()
        return [int(token_id) for token_id in raw]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def estimate_gas(self, function: Any, value: int = 0) -> int:
        signer = self._require_signer()
        return int(await function.estimate_gas({"from": signer.address, "value": value}))

    async def _send(self, function: Any, value: int) -> str:
        signer = self._require_signer()
        estimate = await self.estimate_gas(function, value)
        gas_limit = padded_gas_limit(estimate)
        tx = await function.build_transaction(
            {"from": signer.address, "value": value, "gas": gas_limit}
        )
        logger.info(
            "Submitting %s from %s (value=%d wei, gas=%d)",
            getattr(function, "fn_name", "mint"),
            signer.address,
            value,
            gas_limit,
        )
        try:
            return await signer.send(tx)
        except Exception as e:
            if chain_error_code(e) == USER_REJECTED_CODE:
                raise UserRejectedError() from e
            raise

    async def public_mint(self, quantity: int) -> str:
        price = await self.public_price()
        return await self._send(self.contract.functions.publicMint(quantity), price * quantity)

    async def whitelist_mint(self, quantity: int, proof: Sequence[str]) -> str:
        price = await self.whitelist_price()
        return await self._send(
            self.contract.functions.whitelistMint(quantity, list(proof)),
            price * quantity,
        )

    async def free_mint(self, quantity: int, proof: Sequence[str]) -> str:
        return await self._send(self.contract.functions.freeMint(quantity, list(proof)), 0)

    async def wait_for_receipt(self, tx_hash: str, timeout: float = RECEIPT_TIMEOUT_S) -> Any:
        """
        Wait for the transaction to be mined.

        Raises:
            TransactionRevertedError: If the receipt reports failure
        """
        if self.w3 is None:
            raise RuntimeError("MintContract has no web3 instance to wait with")
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        if receipt["status"] == 0:
            raise TransactionRevertedError(tx_hash, receipt)
        return receipt

    def _require_signer(self) -> TransactionSigner:
        if self.signer is None:
            raise WalletNotConnectedError()
        return self.signer


__all__ = [
    "MINT_ABI",
    "GAS_LIMIT_NUMERATOR",
    "GAS_LIMIT_DENOMINATOR",
    "padded_gas_limit",
    "TransactionSigner",
    "NodeSigner",
    "LocalAccountSigner",
    "MintContract",
]
