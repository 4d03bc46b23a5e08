"""
Mint-flow errors and chain error mapping.

Nothing here retries; a failed mint is reported and left to the user.
"""

from __future__ import annotations

from typing import Any, Optional

from web3.exceptions import ContractLogicError

from core.schemas.errors import CabalException, ErrorCodes


USER_REJECTED_CODE = 4001
UNRECOGNIZED_CHAIN_CODE = 4902

DEFAULT_MINT_ERROR = "Minting failed"


class MintError(CabalException):
    """Base class for mint-flow failures."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.MINT_NOT_ALLOWED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details, retryable=False)


class WalletNotConnectedError(MintError):
    def __init__(self, message: str = "Connect your wallet to mint") -> None:
        super().__init__(message, code=ErrorCodes.WALLET_NOT_CONNECTED)


class WrongNetworkError(MintError):
    def __init__(
        self,
        expected_chain_id: int,
        actual_chain_id: Optional[int],
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            message or f"Switch to chain {expected_chain_id} to mint",
            code=ErrorCodes.WRONG_NETWORK,
            details={"expected": expected_chain_id, "actual": actual_chain_id},
        )


class UserRejectedError(MintError):
    def __init__(self, message: str = "Transaction rejected in wallet") -> None:
        super().__init__(message, code=ErrorCodes.USER_REJECTED)


class TransactionRevertedError(MintError):
    """A mined transaction whose receipt reports ``status == 0``."""

    def __init__(self, tx_hash: str, receipt: Any = None) -> None:
        super().__init__(
            f"Transaction {tx_hash} reverted",
            code=ErrorCodes.CONTRACT_REVERTED,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash
        self.receipt = receipt


class SubmissionError(CabalException):
    """The wallet submission API rejected or failed a request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SUBMISSION_FAILED,
            details={"status_code": status_code} if status_code is not None else None,
            retryable=status_code is None or status_code >= 500,
        )
        self.status_code = status_code


def chain_error_code(exc: BaseException) -> Optional[int]:
    """
    Pull an EIP-1193 / JSON-RPC error code out of an exception, if any.

    Providers put it on ``code``, in an error dict passed as the first
    argument, or in ``rpc_response["error"]``.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code

    candidates: list[Any] = list(getattr(exc, "args", ()))
    rpc_response = getattr(exc, "rpc_response", None)
    if isinstance(rpc_response, dict):
        candidates.append(rpc_response.get("error"))

    for candidate in candidates:
        if isinstance(candidate, dict) and isinstance(candidate.get("code"), int):
            return candidate["code"]
    return None


def _revert_reason(exc: ContractLogicError) -> str:
    message = getattr(exc, "message", None) or str(exc)
    prefix = "execution reverted: "
    if message.startswith(prefix):
        return message[len(prefix):]
    return message


def describe_chain_error(exc: BaseException) -> str:
    """
    Human message for a failed chain interaction. Never raises.

    Order: user rejection, revert reason, wrong network, insufficient
    funds, then the exception's own reason or message, then a generic
    fallback.
    """
    try:
        if isinstance(exc, UserRejectedError) or chain_error_code(exc) == USER_REJECTED_CODE:
            return "Transaction rejected in wallet"
        if isinstance(exc, ContractLogicError):
            return _revert_reason(exc) or DEFAULT_MINT_ERROR
        if isinstance(exc, CabalException):
            return exc.message or DEFAULT_MINT_ERROR

        text = str(exc)
        if "insufficient funds" in text.lower():
            return "Insufficient funds for this mint"

        reason = getattr(exc, "reason", None)
        if isinstance(reason, str) and reason:
            return reason
        message = getattr(exc, "message", None)
        if isinstance(message, str) and message:
            return message
        return text or DEFAULT_MINT_ERROR
    except Exception:  # describing an error must not raise a new one
        return DEFAULT_MINT_ERROR


__all__ = [
    "USER_REJECTED_CODE",
    "UNRECOGNIZED_CHAIN_CODE",
    "DEFAULT_MINT_ERROR",
    "MintError",
    "WalletNotConnectedError",
    "WrongNetworkError",
    "UserRejectedError",
    "TransactionRevertedError",
    "SubmissionError",
    "chain_error_code",
    "describe_chain_error",
]
