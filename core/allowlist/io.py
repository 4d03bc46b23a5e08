"""
Module 03 - Allow-List I/O
Reading address lists and reading/writing whitelist.json documents.

Owner: Protocol/Crypto Engineer
Module ID: M03
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex


_SPLIT_RE = re.compile(r"[,\s]+")


def load_address_file(path: str | Path) -> list[str]:
    """
    Read raw addresses from a file.

    Text files hold one address per line or comma-separated values; blank
    lines and ``#`` comments are ignored. ``.json`` files may be a list of
    addresses or an object with an ``addresses`` list.

    Addresses are returned as written; normalization happens in
    ``AllowList.build`` so errors can point at the bad entry.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() == ".json":
        data = json.loads(text)
        if isinstance(data, dict):
            data = data.get("addresses")
        if not isinstance(data, list):
            raise ValueError(
                f"{path}: expected a JSON list or an object with an 'addresses' list"
            )
        return [str(item) for item in data]

    addresses: list[str] = []
    for line in text.splitlines():
        line = line.split("#", 1)[0]
        addresses.extend(token for token in _SPLIT_RE.split(line) if token)
    return addresses


def save_allowlist_document(document: dict[str, Any], path: str | Path) -> Path:
    """Write a whitelist.json document, pretty-printed like the original tool."""
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True)
    path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    return path


def load_allowlist_document(path: str | Path) -> dict[str, Any]:
    """
    Load and structurally validate a whitelist.json document.

    Raises:
        ValueError: If the root or any proof is not 0x-prefixed 32-byte hex
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Allow-list document must be a JSON object")

    root = data.get("merkleRoot")
    if not isinstance(root, str) or len(from_hex(root)) != 32:
        raise ValueError("merkleRoot must be a 0x-prefixed 32-byte hex string")

    whitelist = data.get("whitelist")
    if not isinstance(whitelist, dict):
        raise ValueError("whitelist must be an object of address -> proof")

    for address, proof in whitelist.items():
        if not isinstance(proof, list):
            raise ValueError(f"Proof for {address} must be a list")
        for node in proof:
            if not isinstance(node, str) or len(from_hex(node)) != 32:
                raise ValueError(f"Proof for {address} contains an invalid node")

    return data


__all__ = [
    "load_address_file",
    "save_allowlist_document",
    "load_allowlist_document",
]
