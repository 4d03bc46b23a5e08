"""
Core cryptographic utilities.

Module 02 provides keccak hashing for allow-list commitments.
"""
from .hashing import (
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
)

__all__ = [
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
