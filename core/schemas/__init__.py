"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

from .errors import (
    AddressNotListedError,
    CabalException,
    EmptyAllowListError,
    ErrorCodes,
    InvalidAddressError,
    StorageError,
)
from .mint import (
    SaleSnapshot,
    SaleState,
    WalletMintStats,
)
from .submissions import WalletSubmission


__all__ = [
    # Errors
    "ErrorCodes",
    "CabalException",
    "InvalidAddressError",
    "EmptyAllowListError",
    "AddressNotListedError",
    "StorageError",
    # Mint
    "SaleState",
    "WalletMintStats",
    "SaleSnapshot",
    # Submissions
    "WalletSubmission",
]
