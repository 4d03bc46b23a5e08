"""
Module 09C - CLI Submissions Commands

Talk to the wallet submission API.

Usage:
    cabal submissions list [--json]
    cabal submissions submit 0xabc...
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.config.runtime import RuntimeConfig
from core.http.client import HttpClient
from mintflow.errors import SubmissionError
from mintflow.submissions import SubmissionClient


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def build_client(runtime: RuntimeConfig) -> SubmissionClient:
    return SubmissionClient(HttpClient.from_config(runtime.http), runtime.client)


def submissions_list_cmd(args: Namespace) -> int:
    runtime: RuntimeConfig = args.cli_config.runtime
    client = build_client(runtime)
    try:
        records = client.list()
    except SubmissionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        client.http.close()

    if args.json:
        print(json.dumps({"submissions": [r.to_api() for r in records]}, indent=2))
    else:
        if not records:
            print("No wallet submissions yet")
        for record in records:
            print(f"{record.submitted_at.isoformat()}  {record.address}")
    return EXIT_SUCCESS


def submissions_submit_cmd(args: Namespace) -> int:
    runtime: RuntimeConfig = args.cli_config.runtime
    client = build_client(runtime)
    try:
        record = client.submit(args.address)
    except SubmissionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        client.http.close()

    print(f"Wallet submitted successfully: {record.address}")
    return EXIT_SUCCESS
