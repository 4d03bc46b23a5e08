"""
Module 02 - Merkle Tree Implementation
Deterministic sorted-pair Merkle tree construction, proof generation,
and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification
- Standard promotion rule for odd number of nodes

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing happens upstream: leaf = keccak256(address bytes)
   - Implemented via core.allowlist.address.address_leaf()
2. Parent hashing: parent = keccak256(sorted(left, right))
3. Odd rule: an unpaired last node is promoted unchanged
4. Empty leaves: rejected with ValueError
5. Single leaf: root = leaf (the leaf hash itself)

These rules match the on-chain verifier (OpenZeppelin MerkleProof) so a
proof produced here is accepted by the contract as-is.

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined by upstream (allow-list order)
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import hash_pair, to_hex


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Because parents hash sorted pairs, verification never needs the leaf
    position; ``index`` is kept for diagnostics only.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def verify(self) -> bool:
        """Check this proof against its own root."""
        return verify_merkle_proof(self.leaf, self.siblings, self.root)

    def hex_siblings(self) -> list[str]:
        """Siblings as 0x-prefixed hex, ready to pass as ``bytes32[]``."""
        return [to_hex(s) for s in self.siblings]


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is order-independent: keccak256(min + max)
    """
    return hash_pair(left, right)


def _next_level(level: Sequence[bytes]) -> list[bytes]:
    """Pair adjacent nodes; a trailing unpaired node moves up unchanged."""
    nxt: list[bytes] = []
    for i in range(0, len(level), 2):
        if i + 1 < len(level):
            nxt.append(merkle_parent(level[i], level[i + 1]))
        else:
            nxt.append(level[i])
    return nxt


def build_merkle_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first and root last.

    Example: [a, b, c] -> [[a, b, c], [parent(a,b), c], [parent(parent(a,b), c)]]

    Raises:
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build a Merkle tree from an empty leaf list")

    layers: list[list[bytes]] = [list(leaves)]
    while len(layers[-1]) > 1:
        layers.append(_next_level(layers[-1]))
    return layers


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Algorithm:
    1. If empty: raise ValueError
    2. If single leaf: return the leaf itself
    3. Otherwise, iteratively build levels:
       - Pair adjacent nodes and compute sorted-pair parent hashes
       - If odd number of nodes, promote the last one unchanged
       - Repeat until single root remains

    Args:
        leaves: Sequence of leaf hashes (32 bytes each). Order is preserved.

    Returns:
        32-byte Merkle root

    Raises:
        ValueError: If leaves is empty
    """
    return build_merkle_layers(leaves)[-1][0]


def proof_from_layers(layers: Sequence[Sequence[bytes]], index: int) -> MerkleProof:
    """
    Extract the proof for leaf ``index`` from prebuilt layers.

    Promoted nodes have no sibling at that level, so they add nothing to
    the proof; the result is the minimal sibling path.
    """
    leaves = layers[0]
    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for level in layers[:-1]:
        # XOR with 1 flips the last bit: left <-> right neighbour
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2

    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=tuple(siblings),
        root=layers[-1][0],
    )


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Args:
        leaves: Sequence of leaf hashes
        index: 0-based index of the leaf to prove

    Returns:
        MerkleProof with leaf, index, siblings (bottom-up), and root

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")
    return proof_from_layers(build_merkle_layers(leaves), index)


def verify_merkle_proof(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
    """
    Verify a Merkle proof.

    Recomputes the root from the leaf and siblings with the sorted-pair
    rule, the same fold the contract performs, and compares it to ``root``.

    Args:
        leaf: The leaf hash being proven
        siblings: Sibling hashes, bottom-up
        root: The claimed Merkle root

    Returns:
        True if the proof is valid, False otherwise
    """
    current_hash = leaf
    for sibling in siblings:
        current_hash = merkle_parent(current_hash, sibling)
    return current_hash == root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a Merkle tree with given number of leaves.

    Depth is the number of levels from leaves to root (inclusive).
    A single leaf has depth 1, two leaves have depth 2, etc.

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleProof",
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_layers",
    "verify_merkle_proof",
    "compute_tree_depth",
]
