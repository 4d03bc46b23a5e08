"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy shared by the allow-list builder, the
wallet submission service and the mint-flow client.
Errors are Python exceptions carrying a stable code, details and a
retryable flag; the API turns them into JSON envelopes.
"""

from typing import Any


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input validation
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Allow-list / Merkle
    EMPTY_ALLOWLIST = "EMPTY_ALLOWLIST"
    ADDRESS_NOT_LISTED = "ADDRESS_NOT_LISTED"

    # Storage
    STORAGE_ERROR = "STORAGE_ERROR"

    # Chain / contract
    CONTRACT_REVERTED = "CONTRACT_REVERTED"
    WALLET_NOT_CONNECTED = "WALLET_NOT_CONNECTED"
    WRONG_NETWORK = "WRONG_NETWORK"
    USER_REJECTED = "USER_REJECTED"
    MINT_NOT_ALLOWED = "MINT_NOT_ALLOWED"

    # Submission client
    SUBMISSION_FAILED = "SUBMISSION_FAILED"

    # Generic
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CabalException(Exception):
    """Base exception for all project errors."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidAddressError(CabalException):
    """Raised when a value is not a 0x-prefixed 40-hex-digit address."""

    def __init__(self, value: Any, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        # Truncate so garbage input cannot flood logs
        full_details["value"] = repr(value)[:64]
        super().__init__(
            message="A valid wallet address is required",
            code=ErrorCodes.INVALID_ADDRESS,
            details=full_details,
            retryable=False,
        )


class EmptyAllowListError(CabalException):
    """Raised when an allow-list would be built from zero addresses."""

    def __init__(self, message: str = "Cannot build an allow-list from an empty address list") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_ALLOWLIST,
            retryable=False,
        )


class AddressNotListedError(CabalException):
    """Raised when a proof is requested for an address outside the allow-list."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Address {address} is not part of the allow-list",
            code=ErrorCodes.ADDRESS_NOT_LISTED,
            details={"address": address},
            retryable=False,
        )


class StorageError(CabalException):
    """Raised when the submission store fails to read or write."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCodes.STORAGE_ERROR,
            details=full_details,
            retryable=True,
        )


__all__ = [
    "ErrorCodes",
    "CabalException",
    "InvalidAddressError",
    "EmptyAllowListError",
    "AddressNotListedError",
    "StorageError",
]
