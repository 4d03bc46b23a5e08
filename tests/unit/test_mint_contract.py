"""
Mint Contract Tests
Tests for mintflow/contract.py and mintflow/client.py against FakeWeb3.

Tests:
1. Reads map raw values to typed results
2. Writes estimate gas first, pad by 10%, then send
3. Value = unit price x quantity; free mint sends no value
4. Reverted receipts raise
5. Snapshot loads every read and keeps the previous snapshot on failure
"""
import asyncio

import pytest
from eth_account import Account
from web3 import Web3

from core.schemas.mint import SaleState
from fixtures import TEST_PRIVATE_KEY, FakeContract, FakeWeb3, make_snapshot
from mintflow.client import MintClient, format_ether
from mintflow.contract import (
    LocalAccountSigner,
    MINT_ABI,
    MintContract,
    NodeSigner,
    padded_gas_limit,
)
from mintflow.errors import (
    TransactionRevertedError,
    UserRejectedError,
    WalletNotConnectedError,
    describe_chain_error,
)


ACCOUNT = Web3.to_checksum_address("0x" + "ab" * 20)


def _contract(w3: FakeWeb3, signer=None) -> MintContract:
    return MintContract.at(w3, w3.contract.address, signer=signer)


class TestAbi:
    """The ABI covers the contract surface the flow uses."""

    def test_function_names(self):
        names = {entry["name"] for entry in MINT_ABI}
        assert names == {
            "publicMint", "whitelistMint", "freeMint", "saleState",
            "publicPrice", "whitelistPrice", "remainingSupply", "totalSupply",
            "MAX_SUPPLY", "freeMintRemaining", "getWalletMintStats", "walletOfOwner",
        }

    def test_payable_flags(self):
        by_name = {entry["name"]: entry for entry in MINT_ABI}
        assert by_name["publicMint"]["stateMutability"] == "payable"
        assert by_name["whitelistMint"]["stateMutability"] == "payable"
        assert by_name["freeMint"]["stateMutability"] == "nonpayable"


class TestGasLimit:
    """Tests for padded_gas_limit()."""

    @pytest.mark.parametrize(
        "estimate,limit",
        [(100_000, 110_000), (21_001, 23_101), (9, 9), (0, 0)],
    )
    def test_padding(self, estimate, limit):
        assert padded_gas_limit(estimate) == limit


class TestReads:
    """Contract reads."""

    def test_sale_state(self):
        w3 = FakeWeb3(FakeContract(saleState=1))
        assert asyncio.run(_contract(w3).get_sale_state()) is SaleState.WHITELIST

    def test_unknown_sale_state_reads_closed(self):
        w3 = FakeWeb3(FakeContract(saleState=9))
        assert asyncio.run(_contract(w3).get_sale_state()) is SaleState.CLOSED

    def test_wallet_stats_uses_checksum_address(self):
        contract = FakeContract(getWalletMintStats=(1, 2, 3, 4, True))
        w3 = FakeWeb3(contract)

        stats = asyncio.run(_contract(w3).get_wallet_mint_stats(ACCOUNT.lower()))
        assert stats.whitelist_minted == 1
        assert stats.public_minted == 2
        assert stats.free_minted == 3
        assert stats.free_mint_allowance == 4
        assert stats.holds_partner_token is True
        assert contract.events("call")[-1][2] == (ACCOUNT,)

    def test_wallet_of_owner(self):
        w3 = FakeWeb3(FakeContract(walletOfOwner=[3, 17]))
        assert asyncio.run(_contract(w3).wallet_of_owner(ACCOUNT)) == [3, 17]


class TestWrites:
    """Mint transactions."""

    def test_public_mint_value_and_gas(self):
        w3 = FakeWeb3()
        contract = _contract(w3, NodeSigner(w3, ACCOUNT))

        tx_hash = asyncio.run(contract.public_mint(3))

        assert tx_hash.startswith("0x")
        (sent,) = w3.eth.sent
        assert sent["value"] == 3 * 40_000_000_000_000_000
        assert sent["gas"] == 110_000
        assert sent["from"] == ACCOUNT

    def test_estimate_happens_before_build(self):
        w3 = FakeWeb3()
        contract = _contract(w3, NodeSigner(w3, ACCOUNT))
        asyncio.run(contract.public_mint(1))

        kinds = [entry[0] for entry in w3.contract.log if entry[0] != "call"]
        assert kinds == ["estimate_gas", "build_transaction"]
        estimate = w3.contract.events("estimate_gas")[0]
        assert estimate[1] == "publicMint"
        assert estimate[3] == {"from": ACCOUNT, "value": 40_000_000_000_000_000}

    def test_whitelist_mint_passes_proof(self):
        w3 = FakeWeb3()
        contract = _contract(w3, NodeSigner(w3, ACCOUNT))
        proof = ["0x" + "01" * 32, "0x" + "02" * 32]

        asyncio.run(contract.whitelist_mint(2, proof))

        build = w3.contract.events("build_transaction")[0]
        assert build[1] == "whitelistMint"
        assert build[2] == (2, proof)
        assert w3.eth.sent[0]["value"] == 2 * 20_000_000_000_000_000

    def test_free_mint_sends_no_value(self):
        w3 = FakeWeb3()
        contract = _contract(w3, NodeSigner(w3, ACCOUNT))
        asyncio.run(contract.free_mint(4, ["0x" + "01" * 32]))

        assert w3.eth.sent[0]["value"] == 0
        assert not [e for e in w3.contract.events("call") if e[1] == "publicPrice"]

    def test_failed_estimate_sends_nothing(self):
        w3 = FakeWeb3()
        w3.contract.gas_estimate = ValueError("execution reverted: Sale not active")
        contract = _contract(w3, NodeSigner(w3, ACCOUNT))

        with pytest.raises(ValueError):
            asyncio.run(contract.public_mint(1))
        assert w3.eth.sent == []

    def test_requires_signer(self):
        w3 = FakeWeb3()
        with pytest.raises(WalletNotConnectedError):
            asyncio.run(_contract(w3).public_mint(1))

    def test_wallet_rejection_raises_user_rejected(self):
        class Rejected(Exception):
            code = 4001

        w3 = FakeWeb3()
        w3.eth.send_error = Rejected("User denied transaction signature")

        with pytest.raises(UserRejectedError) as exc_info:
            asyncio.run(_contract(w3, NodeSigner(w3, ACCOUNT)).public_mint(1))
        assert isinstance(exc_info.value.__cause__, Rejected)
        assert describe_chain_error(exc_info.value) == "Transaction rejected in wallet"

    def test_other_send_errors_propagate(self):
        w3 = FakeWeb3()
        w3.eth.send_error = OSError("connection reset")

        with pytest.raises(OSError):
            asyncio.run(_contract(w3, NodeSigner(w3, ACCOUNT)).public_mint(1))

    def test_local_signer_sends_raw(self):
        w3 = FakeWeb3()
        signer = LocalAccountSigner(w3, TEST_PRIVATE_KEY)
        assert signer.address == Account.from_key(TEST_PRIVATE_KEY).address

        tx_hash = asyncio.run(_contract(w3, signer).public_mint(1))

        assert len(w3.eth.raw_sent) == 1
        assert w3.eth.sent == []
        assert tx_hash == Web3.to_hex(Web3.keccak(w3.eth.raw_sent[0]))


class TestReceipts:
    """wait_for_receipt()."""

    def test_success(self):
        w3 = FakeWeb3()
        receipt = asyncio.run(_contract(w3).wait_for_receipt("0x" + "aa" * 32))
        assert receipt["status"] == 1

    def test_revert_raises(self):
        w3 = FakeWeb3()
        w3.eth.receipt_status = 0
        with pytest.raises(TransactionRevertedError) as exc_info:
            asyncio.run(_contract(w3).wait_for_receipt("0x" + "aa" * 32))
        assert exc_info.value.tx_hash == "0x" + "aa" * 32


class TestSnapshot:
    """MintClient.load_snapshot()."""

    def test_without_account(self):
        w3 = FakeWeb3()
        client = MintClient(_contract(w3))

        snapshot = asyncio.run(client.load_snapshot())

        assert snapshot.total_supply == 100
        assert snapshot.max_supply == 1000
        assert snapshot.sale_state is SaleState.PUBLIC
        assert snapshot.wallet_stats is None
        assert snapshot.owned_tokens == []
        assert client.snapshot is snapshot
        assert snapshot.progress == pytest.approx(10.0)

    def test_with_account(self):
        w3 = FakeWeb3(FakeContract(getWalletMintStats=(0, 0, 0, 2, False), walletOfOwner=[5]))
        snapshot = asyncio.run(MintClient(_contract(w3)).load_snapshot(ACCOUNT))

        assert snapshot.account == ACCOUNT
        assert snapshot.wallet_stats.free_mint_allowance == 2
        assert snapshot.owned_tokens == [5]

    def test_reads_run_concurrently(self):
        contract = FakeContract(getWalletMintStats=(0, 0, 0, 2, False), walletOfOwner=[5])
        contract.yield_reads = True

        snapshot = asyncio.run(MintClient(_contract(FakeWeb3(contract))).load_snapshot(ACCOUNT))

        assert contract.max_pending == 9
        assert contract.pending == 0
        assert snapshot.owned_tokens == [5]

    def test_failed_read_keeps_previous(self):
        contract = FakeContract()
        client = MintClient(_contract(FakeWeb3(contract)))
        first = asyncio.run(client.load_snapshot())

        contract.reads["totalSupply"] = OSError("node unreachable")
        with pytest.raises(OSError):
            asyncio.run(client.load_snapshot())
        assert client.snapshot is first

    def test_estimated_cost(self):
        client = MintClient(_contract(FakeWeb3()))
        public = make_snapshot(sale_state=SaleState.PUBLIC)
        whitelist = make_snapshot(sale_state=SaleState.WHITELIST)

        assert client.estimated_cost(2, public) == 80_000_000_000_000_000
        assert client.estimated_cost(2, whitelist) == 40_000_000_000_000_000
        assert client.estimated_cost(2) == 0


class TestFormatEther:
    """format_ether()."""

    @pytest.mark.parametrize(
        "wei,text",
        [
            (40_000_000_000_000_000, "0.04"),
            (10**18, "1"),
            (0, "0"),
            (1_500_000_000_000_000_000, "1.5"),
        ],
    )
    def test_format(self, wei, text):
        assert format_ether(wei) == text
