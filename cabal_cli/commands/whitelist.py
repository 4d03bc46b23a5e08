"""
Module 09C - CLI Whitelist Commands

Build a Merkle allow-list from an address file, print proofs, and verify
addresses against a published whitelist.json.

Usage:
    cabal whitelist build addresses.txt --out whitelist.json [--json]
    cabal whitelist build addresses.txt --minting-config mintingConfig.json --list freeMint
    cabal whitelist proof whitelist.json 0xabc... [--json]
    cabal whitelist verify whitelist.json 0xabc...
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from core.allowlist import (
    AllowList,
    load_address_file,
    load_allowlist_document,
    normalize_address,
    save_allowlist_document,
    verify_document_entry,
)
from core.schemas.errors import CabalException
from mintflow.minting_config import MintingConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class BuildSummary:
    """Summary of an allow-list build for CLI output."""
    input: str = ""
    out: str = ""
    merkle_root: str = ""
    address_count: int = 0
    duplicates_dropped: int = 0
    minting_config: str | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["minting_config"] is None:
            del d["minting_config"]
        if not d["errors"]:
            del d["errors"]
        return d


def print_build_human(summary: BuildSummary) -> None:
    if summary.errors:
        for error in summary.errors:
            print(f"Error: {error}", file=sys.stderr)
        return
    print(f"Merkle root:  {summary.merkle_root}")
    print(f"Addresses:    {summary.address_count}")
    if summary.duplicates_dropped:
        print(f"Duplicates:   {summary.duplicates_dropped} dropped")
    print(f"Written:      {summary.out}")
    if summary.minting_config:
        print(f"Updated:      {summary.minting_config}")


def whitelist_build_cmd(args: Namespace) -> int:
    """Handle ``whitelist build``."""
    summary = BuildSummary(input=str(args.input), out=str(args.out))

    try:
        raw = load_address_file(args.input)
        allowlist = AllowList.build(raw, deduplicate=not args.keep_duplicates)
    except (CabalException, OSError, ValueError) as e:
        message = e.message if isinstance(e, CabalException) else str(e)
        if isinstance(e, CabalException) and "position" in e.details:
            message = f"{message} (entry {e.details['position'] + 1}: {e.details.get('value')})"
        summary.errors.append(message)
        _emit(summary, args.json)
        return EXIT_RUNTIME_ERROR

    save_allowlist_document(allowlist.to_document(), args.out)
    summary.merkle_root = allowlist.root_hex
    summary.address_count = len(allowlist)
    summary.duplicates_dropped = len(raw) - len(allowlist)
    logger.info("Built allow-list of %d addresses, root %s", len(allowlist), allowlist.root_hex)

    if args.minting_config:
        path = Path(args.minting_config)
        config = MintingConfig.load(path) if path.exists() else MintingConfig()
        config.with_allowlist(args.list, allowlist).save(path)
        summary.minting_config = str(path)

    _emit(summary, args.json)
    return EXIT_SUCCESS


def _emit(summary: BuildSummary, as_json: bool) -> None:
    if as_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_build_human(summary)


def _load_document(path: str) -> dict[str, Any] | None:
    try:
        return load_allowlist_document(path)
    except (OSError, ValueError) as e:
        print(f"Error: cannot read allow-list {path}: {e}", file=sys.stderr)
        return None


def whitelist_proof_cmd(args: Namespace) -> int:
    """Handle ``whitelist proof``: print the stored proof for an address."""
    document = _load_document(args.document)
    if document is None:
        return EXIT_RUNTIME_ERROR

    try:
        address = normalize_address(args.address)
    except CabalException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    proof = document["whitelist"].get(address)
    if proof is None:
        print(f"Address {address} is not part of the allow-list", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if args.json:
        print(json.dumps({
            "address": address,
            "merkleRoot": document["merkleRoot"],
            "merkleProof": proof,
        }, indent=2))
    else:
        for node in proof:
            print(node)
    return EXIT_SUCCESS


def whitelist_verify_cmd(args: Namespace) -> int:
    """Handle ``whitelist verify``: exit 2 when the address is not included."""
    document = _load_document(args.document)
    if document is None:
        return EXIT_RUNTIME_ERROR

    if verify_document_entry(document, args.address):
        print(f"OK: {args.address.strip().lower()} is included in {document['merkleRoot']}")
        return EXIT_SUCCESS

    print(f"FAILED: {args.address.strip()} is not included in {document['merkleRoot']}")
    return EXIT_VERIFICATION_FAILED
