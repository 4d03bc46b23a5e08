"""
mintingConfig.json: the contract address and the per-wallet proofs the
mint flow hands to ``whitelistMint`` and ``freeMint``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.allowlist.builder import AllowList


LIST_NAMES: tuple[str, ...] = ("whitelist", "freeMint")


class ListEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    merkle_proof: list[str] = Field(default_factory=list, alias="merkleProof")


class ContractInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    address: Optional[str] = None


class MintingConfig(BaseModel):
    """Parsed mintingConfig.json."""

    model_config = ConfigDict(extra="allow")

    contract: ContractInfo = Field(default_factory=ContractInfo)
    lists: dict[str, list[ListEntry]] = Field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path) -> "MintingConfig":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.write_text(json.dumps(self.to_document(), indent=2) + "\n", encoding="utf-8")
        return path

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def entry_for(self, list_name: str, account: Optional[str]) -> Optional[ListEntry]:
        """Entry for ``account`` in the named list, matched case-insensitively."""
        if not account:
            return None
        wanted = account.lower()
        for entry in self.lists.get(list_name, []):
            if entry.address.lower() == wanted:
                return entry
        return None

    def proof_for(self, list_name: str, account: Optional[str]) -> Optional[list[str]]:
        """The stored proof, or None when the wallet has no usable entry."""
        entry = self.entry_for(list_name, account)
        if entry is None or not entry.merkle_proof:
            return None
        return list(entry.merkle_proof)

    def with_allowlist(self, list_name: str, allowlist: AllowList) -> "MintingConfig":
        """Copy with ``list_name`` replaced by entries built from ``allowlist``."""
        if list_name not in LIST_NAMES:
            raise ValueError(f"Unknown list {list_name!r}; expected one of {LIST_NAMES}")
        document = allowlist.to_document()
        entries = [
            ListEntry(address=address, merkle_proof=proof)
            for address, proof in document["whitelist"].items()
        ]
        lists = dict(self.lists)
        lists[list_name] = entries
        return self.model_copy(update={"lists": lists})


__all__ = [
    "LIST_NAMES",
    "ListEntry",
    "ContractInfo",
    "MintingConfig",
]
