"""
Module 03 - Allow-List
Address normalization and Merkle allow-list construction.

Owner: Protocol/Crypto Engineer
Module ID: M03

Usage:
    from core.allowlist import AllowList, load_address_file

    allowlist = AllowList.build(load_address_file("addresses.txt"))
    allowlist.root_hex                   # publish on-chain
    allowlist.hex_proof_for(address)     # pass to whitelistMint / freeMint
"""
from .address import (
    ADDRESS_RE,
    address_leaf,
    format_address,
    is_valid_address,
    normalize_address,
)
from .builder import AllowList, verify_document_entry
from .io import (
    load_address_file,
    load_allowlist_document,
    save_allowlist_document,
)


__all__ = [
    "ADDRESS_RE",
    "normalize_address",
    "is_valid_address",
    "address_leaf",
    "format_address",
    "AllowList",
    "verify_document_entry",
    "load_address_file",
    "save_allowlist_document",
    "load_allowlist_document",
]
