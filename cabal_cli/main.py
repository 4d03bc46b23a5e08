"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m cabal_cli serve [--host HOST] [--port PORT]
    python -m cabal_cli whitelist build <addresses> [--out whitelist.json] [--minting-config PATH] [--list NAME]
    python -m cabal_cli whitelist proof <whitelist.json> <address> [--json]
    python -m cabal_cli whitelist verify <whitelist.json> <address>
    python -m cabal_cli status [--account ADDRESS] [--json]
    python -m cabal_cli mint {public,whitelist,free} [--quantity N]
    python -m cabal_cli submissions list [--json]
    python -m cabal_cli submissions submit <address>
    python -m cabal_cli config --init

Environment Variables:
    DATABASE_URL                Postgres connection string for the API
    PORT                        API port (default: 3001)
    CABAL_LOG_LEVEL             Log level (default: INFO)
    CABAL_RPC_URL               JSON-RPC endpoint of the mint chain
    CABAL_CONTRACT_ADDRESS      Mint contract address
    CABAL_MINTING_CONFIG        Path to mintingConfig.json
    CABAL_PRIVATE_KEY           Local key used by ``mint``
    CABAL_API_BASE_URL          Base URL of the submission API
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from cabal_cli import __version__
from cabal_cli.commands import mint, serve, status, submissions, whitelist
from cabal_cli.config import load_config, get_default_config_template
from mintflow.phases import MAX_MINT_PER_TX


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="cabal",
        description="Cabal mint CLI - build allow-lists, inspect the sale, mint, and run the submission API.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./cabal.json or ~/.config/cabal/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the wallet submission API",
        description="Start the HTTP API that records wallet submissions.",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT or 3001)")
    serve_parser.set_defaults(func=serve.serve_cmd)

    # --- whitelist command ---
    wl_parser = subparsers.add_parser(
        "whitelist",
        help="Build and check Merkle allow-lists",
        description="Build a whitelist.json from an address file and query proofs from it.",
    )
    wl_subparsers = wl_parser.add_subparsers(dest="whitelist_action", help="Action")

    wl_build = wl_subparsers.add_parser("build", help="Build whitelist.json from an address file")
    wl_build.add_argument("input", type=str, help="Address file (.txt, .csv or .json)")
    wl_build.add_argument("--out", "-o", type=str, default="whitelist.json", help="Output path (default: whitelist.json)")
    wl_build.add_argument(
        "--keep-duplicates",
        action="store_true",
        default=False,
        help="Keep repeated addresses as separate leaves",
    )
    wl_build.add_argument(
        "--minting-config",
        type=str,
        default=None,
        help="Also write the per-address proofs into this mintingConfig.json",
    )
    wl_build.add_argument(
        "--list",
        type=str,
        choices=["whitelist", "freeMint"],
        default="whitelist",
        help="Which list in the minting config to update (default: whitelist)",
    )
    wl_build.add_argument("--json", action="store_true", help="JSON output")
    wl_build.set_defaults(func=whitelist.whitelist_build_cmd)

    wl_proof = wl_subparsers.add_parser("proof", help="Print the proof for an address")
    wl_proof.add_argument("document", type=str, help="Path to whitelist.json")
    wl_proof.add_argument("address", type=str, help="Wallet address")
    wl_proof.add_argument("--json", action="store_true", help="JSON output")
    wl_proof.set_defaults(func=whitelist.whitelist_proof_cmd)

    wl_verify = wl_subparsers.add_parser("verify", help="Check an address against the published root")
    wl_verify.add_argument("document", type=str, help="Path to whitelist.json")
    wl_verify.add_argument("address", type=str, help="Wallet address")
    wl_verify.add_argument("--json", action="store_true", help="JSON output")
    wl_verify.set_defaults(func=whitelist.whitelist_verify_cmd)

    wl_parser.set_defaults(func=lambda args: wl_parser.print_help() or EXIT_SUCCESS)

    # --- status command ---
    status_parser = subparsers.add_parser(
        "status",
        help="Show the on-chain sale state",
        description="Read supply, prices and sale state from the mint contract.",
    )
    status_parser.add_argument("--account", type=str, default=None, help="Also show stats for this wallet")
    status_parser.add_argument("--json", action="store_true", help="JSON output")
    status_parser.set_defaults(func=status.status_cmd)

    # --- mint command ---
    mint_parser = subparsers.add_parser(
        "mint",
        help="Mint tokens with a local key",
        description="Send a mint transaction signed with CABAL_PRIVATE_KEY and wait for it to confirm.",
    )
    mint_parser.add_argument("kind", type=str, choices=["public", "whitelist", "free"], help="Mint path")
    mint_parser.add_argument(
        "--quantity", "-n",
        type=int,
        default=1,
        help=f"Tokens to mint (1-{MAX_MINT_PER_TX}, default: 1)",
    )
    mint_parser.set_defaults(func=mint.mint_cmd)

    # --- submissions command ---
    sub_parser = subparsers.add_parser(
        "submissions",
        help="Talk to the wallet submission API",
        description="List recorded wallets or submit one.",
    )
    sub_subparsers = sub_parser.add_subparsers(dest="submissions_action", help="Action")

    sub_list = sub_subparsers.add_parser("list", help="List recorded wallets, newest first")
    sub_list.add_argument("--json", action="store_true", help="JSON output")
    sub_list.set_defaults(func=submissions.submissions_list_cmd)

    sub_submit = sub_subparsers.add_parser("submit", help="Record a wallet address")
    sub_submit.add_argument("address", type=str, help="Wallet address")
    sub_submit.set_defaults(func=submissions.submissions_submit_cmd)

    sub_parser.set_defaults(func=lambda args: sub_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="cabal.json",
        help="Path for config file (default: cabal.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (CABAL_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "source": config.source or "(defaults)",
            "log_level": config.log_level,
            "log_file": config.log_file,
            **config.runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: cabal config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
