"""
Module 03 - Allow-List Builder
Turns an address list into a Merkle root plus per-address proofs.

Owner: Protocol/Crypto Engineer
Module ID: M03

The builder is the offline half of the whitelist / free-mint mechanism:
the root is published to the contract, and each listed wallet submits its
proof with the mint call. Leaf order follows input order after
normalization and de-duplication.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from core.crypto.hashing import to_hex
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.merkle_tree import MerkleProof, build_merkle_layers, proof_from_layers
from core.schemas.errors import AddressNotListedError, EmptyAllowListError, InvalidAddressError

from .address import address_leaf, normalize_address


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowList:
    """
    An immutable allow-list commitment.

    Attributes:
        addresses: Normalized addresses in leaf order
        layers: Merkle tree levels, leaves first and root last
    """
    addresses: tuple[str, ...]
    layers: tuple[tuple[bytes, ...], ...]
    _index: dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        addresses: Iterable[Any],
        *,
        deduplicate: bool = True,
    ) -> "AllowList":
        """
        Normalize, de-duplicate and commit to a list of addresses.

        With ``deduplicate`` (the default) the first occurrence of an address
        wins, compared on the normalized form. With ``deduplicate=False``
        repeated addresses keep their own leaves; proofs are still issued for
        the first occurrence.

        Raises:
            InvalidAddressError: If any entry is malformed
            EmptyAllowListError: If no addresses are given
        """
        normalized: list[str] = []
        seen: set[str] = set()
        dropped = 0
        for position, raw in enumerate(addresses):
            try:
                address = normalize_address(raw)
            except InvalidAddressError as e:
                e.details["position"] = position
                raise
            if address in seen and deduplicate:
                dropped += 1
                continue
            seen.add(address)
            normalized.append(address)

        if not normalized:
            raise EmptyAllowListError()

        if dropped:
            logger.info("Dropped %d duplicate address(es) from allow-list", dropped)

        leaves = [address_leaf(a) for a in normalized]
        layers = tuple(tuple(level) for level in build_merkle_layers(leaves))

        index: dict[str, int] = {}
        for i, address in enumerate(normalized):
            index.setdefault(address, i)

        return cls(addresses=tuple(normalized), layers=layers, _index=index)

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self.layers[0]

    def __len__(self) -> int:
        return len(self.addresses)

    def __contains__(self, address: object) -> bool:
        try:
            return normalize_address(address) in self._index
        except InvalidAddressError:
            return False

    def proof_for(self, address: str) -> MerkleProof:
        """
        Inclusion proof for a listed address.

        Raises:
            InvalidAddressError: If address is malformed
            AddressNotListedError: If address is not in the list
        """
        canonical = normalize_address(address)
        index = self._index.get(canonical)
        if index is None:
            raise AddressNotListedError(canonical)
        return proof_from_layers(self.layers, index)

    def hex_proof_for(self, address: str) -> list[str]:
        return self.proof_for(address).hex_siblings()

    def verify(self, address: str, proof: Sequence[str]) -> bool:
        """
        Check a hex proof for an address against this list's root.

        Mirrors the contract's verification; malformed input yields False.
        """
        try:
            leaf = address_leaf(address)
        except InvalidAddressError:
            return False
        return MerkleVerifier.verify_hex(leaf, proof, self.root_hex)

    def to_document(self) -> dict[str, Any]:
        """
        Render as the ``whitelist.json`` document.

        Shape: ``{"merkleRoot": "0x..", "whitelist": {address: [proof..]}}``
        """
        return {
            "merkleRoot": self.root_hex,
            "whitelist": {
                address: proof_from_layers(self.layers, index).hex_siblings()
                for address, index in self._index.items()
            },
        }


def verify_document_entry(document: dict[str, Any], address: str) -> bool:
    """
    Verify an address against a loaded ``whitelist.json`` document.

    Uses only the document's root and the stored proof, the same inputs
    the contract sees.
    """
    try:
        canonical = normalize_address(address)
    except InvalidAddressError:
        return False
    proof = document.get("whitelist", {}).get(canonical)
    root = document.get("merkleRoot")
    if proof is None or not isinstance(root, str):
        return False
    return MerkleVerifier.verify_hex(address_leaf(canonical), proof, root)


__all__ = [
    "AllowList",
    "verify_document_entry",
]
