"""
Mint-flow client for the collection contract.

- contract: typed contract access, signers, receipts
- client: consistent sale snapshots
- wallet: the explicit wallet session
- flow: the mint state machine
- minting_config: mintingConfig.json proofs
- submissions: wallet submission API client
- phases: mint phases and countdowns
"""

from mintflow.client import MintClient, format_ether
from mintflow.contract import LocalAccountSigner, MintContract, NodeSigner, padded_gas_limit
from mintflow.errors import (
    MintError,
    SubmissionError,
    TransactionRevertedError,
    describe_chain_error,
)
from mintflow.flow import MintFlow, MintKind, MintState, MintStatus, clamp_quantity
from mintflow.minting_config import MintingConfig
from mintflow.phases import MintPhase, time_remaining
from mintflow.submissions import SubmissionClient
from mintflow.wallet import WalletSession

__all__ = [
    "MintClient",
    "format_ether",
    "MintContract",
    "NodeSigner",
    "LocalAccountSigner",
    "padded_gas_limit",
    "MintError",
    "SubmissionError",
    "TransactionRevertedError",
    "describe_chain_error",
    "MintFlow",
    "MintKind",
    "MintState",
    "MintStatus",
    "clamp_quantity",
    "MintingConfig",
    "MintPhase",
    "time_remaining",
    "SubmissionClient",
    "WalletSession",
]
