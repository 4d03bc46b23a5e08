"""
Module 09C - Cabal CLI

Command-line interface for the Cabal mint.

Usage:
    python -m cabal_cli serve
    python -m cabal_cli whitelist build addresses.txt --out whitelist.json
    python -m cabal_cli status --account 0xabc...
    python -m cabal_cli mint public --quantity 2
    python -m cabal_cli submissions list
"""

__version__ = "0.1.0"
