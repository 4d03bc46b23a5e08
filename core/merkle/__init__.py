"""
Module 02 - Merkle Tree and Commitments
Deterministic sorted-pair Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root: Compute root from leaf hashes
- build_merkle_layers: Every tree level, leaves first
- build_merkle_proof: Generate proof for a specific leaf
- verify_merkle_proof: Verify a proof against a claimed root

Canonical Commitment Rules:
1. Leaf hashing: keccak256(address bytes), see core.allowlist
2. Parent hashing: keccak256(sorted(left, right))
3. Odd rule: unpaired last node is promoted unchanged
4. Empty tree: rejected
5. Single leaf: root = leaf

Usage:
    from core.merkle import build_merkle_root, build_merkle_proof, verify_merkle_proof
    from core.allowlist import address_leaf

    leaves = [address_leaf(a) for a in addresses]
    root = build_merkle_root(leaves)
    proof = build_merkle_proof(leaves, index=2)
    assert verify_merkle_proof(proof.leaf, proof.siblings, root)
"""
from .merkle_tree import (
    MerkleProof,
    merkle_parent,
    build_merkle_layers,
    build_merkle_root,
    build_merkle_proof,
    proof_from_layers,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleProof",
    # Core functions
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_layers",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
