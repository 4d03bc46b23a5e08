"""
Module 09C - CLI Serve Command

Run the wallet submission API with uvicorn.

Usage:
    cabal serve [--host 0.0.0.0] [--port 3001]
"""

from __future__ import annotations

import sys
from argparse import Namespace

from core.config.runtime import RuntimeConfig


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def serve_cmd(args: Namespace) -> int:
    runtime: RuntimeConfig = args.cli_config.runtime
    if not runtime.database.url:
        print("Error: DATABASE_URL is required", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    from api.app import run

    run(runtime, host=args.host, port=args.port)
    return EXIT_SUCCESS
