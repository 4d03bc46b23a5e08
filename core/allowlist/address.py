"""
Module 03 - Address Normalization
Canonical handling of EVM account addresses.

Owner: Protocol/Crypto Engineer
Module ID: M03

Canonical form is lower-case hex, 0x prefix, exactly 40 hex digits.
Surrounding whitespace is trimmed before validation; nothing else is
repaired. Checksummed (mixed-case) input is accepted but the checksum
itself is not enforced.
"""
from __future__ import annotations

import re
from typing import Any

from core.crypto.hashing import keccak256
from core.schemas.errors import InvalidAddressError


ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def normalize_address(value: Any) -> str:
    """
    Return the canonical lower-case form of an address.

    Raises:
        InvalidAddressError: If value is not a string or does not match
            ``^0x[a-fA-F0-9]{40}$`` after trimming.

    Example:
        >>> normalize_address("  0xABCDEF0123456789ABCDEF0123456789ABCDEF01 ")
        '0xabcdef0123456789abcdef0123456789abcdef01'
    """
    if not isinstance(value, str):
        raise InvalidAddressError(value)
    trimmed = value.strip()
    if not ADDRESS_RE.match(trimmed):
        raise InvalidAddressError(value)
    return trimmed.lower()


def is_valid_address(value: Any) -> bool:
    try:
        normalize_address(value)
    except InvalidAddressError:
        return False
    return True


def address_leaf(address: str) -> bytes:
    """
    Leaf hash for an address: keccak256 over its raw 20 bytes.

    Equivalent to Solidity ``keccak256(abi.encodePacked(msg.sender))``.
    """
    canonical = normalize_address(address)
    return keccak256(bytes.fromhex(canonical[2:]))


def format_address(address: str | None, head: int = 6, tail: int = 4) -> str:
    """Shorten an address for display, e.g. ``0xabcd…ef01``."""
    if not address:
        return ""
    return f"{address[:head]}...{address[-tail:]}"


__all__ = [
    "ADDRESS_RE",
    "normalize_address",
    "is_valid_address",
    "address_leaf",
    "format_address",
]
