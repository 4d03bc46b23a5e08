"""
Module 02 - Merkle Proofs Convenience Wrappers
Thin wrappers around core Merkle tree functions for cleaner API.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides class-based interfaces:
- MerkleProver: Generate proofs for leaves
- MerkleVerifier: Verify proofs, including the hex form stored in
  whitelist.json and passed to the contract

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import from_hex, to_hex
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> leaves = [keccak256(b"a"), keccak256(b"b"), keccak256(b"c")]
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> proof.leaf == leaves[1]
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            IndexError: If index is out of range
            ValueError: If leaves is empty
        """
        return build_merkle_proof(leaves, index)

    @staticmethod
    def prove_hex(leaves: Sequence[bytes], index: int) -> list[str]:
        """Proof siblings as 0x-prefixed hex strings."""
        return build_merkle_proof(leaves, index).hex_siblings()

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        return build_merkle_root(leaves)

    @staticmethod
    def compute_root_hex(leaves: Sequence[bytes]) -> str:
        return to_hex(build_merkle_root(leaves))


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof against the root it carries."""
        return proof.verify()

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Verify a leaf is included in a Merkle root using raw components."""
        return verify_merkle_proof(leaf, siblings, root)

    @staticmethod
    def verify_hex(leaf: bytes, siblings: Sequence[str], root: str) -> bool:
        """
        Verify a proof given in hex form.

        Malformed hex is treated as a failed proof rather than an error,
        since hex proofs usually arrive from files or user input.
        """
        try:
            decoded = [from_hex(s) for s in siblings]
            root_bytes = from_hex(root)
        except ValueError:
            return False
        return verify_merkle_proof(leaf, decoded, root_bytes)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
