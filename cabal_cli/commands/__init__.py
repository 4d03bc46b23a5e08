"""
CLI command modules.
"""

from cabal_cli.commands import mint, serve, status, submissions, whitelist

__all__ = ["mint", "serve", "status", "submissions", "whitelist"]
