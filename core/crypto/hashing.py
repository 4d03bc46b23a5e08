"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers for allow-list commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Keccak-256 hashing for raw bytes (the EVM's keccak256, not SHA3-256)
- Sorted-pair parent hashing
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Always hash raw bytes exactly as given
- Pair hashing orders its inputs byte-wise, so a parent does not depend on
  which child sits on the left
"""
from __future__ import annotations

from eth_utils import keccak


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling nodes in canonical (sorted) order.

    parent = keccak256(min(a, b) + max(a, b))

    This matches OpenZeppelin's MerkleProof and merkletreejs with
    ``sortPairs: true``.
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
