"""Login command: store an API key on a profile."""

from __future__ import annotations

import argparse
import getpass
import sys

from ..config import Config
from ..credentials import CredentialError
from ..login import AccountClient, login_with_api_key


def register_commands(subparsers: argparse._SubParsersAction) -> None:
    """Register the login command with the main CLI."""
    login_parser = subparsers.add_parser(
        "login",
        help="Configure a profile with an API key",
        description=(
            "Store an API key on the selected profile. Test mode keys are kept in "
            "the profiles file; live mode keys are kept in the OS secure store."
        ),
    )
    login_parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="API key to store (prompted for if omitted)",
    )
    login_parser.set_defaults(func=cmd_login)


def cmd_login(args: argparse.Namespace) -> int:
    """Store an API key on the selected profile."""
    config = Config.from_args(args)

    api_key = args.api_key
    if api_key is None:
        if not sys.stdin.isatty():
            print("Error: --api-key is required when not running interactively", file=sys.stderr)
            return 1
        api_key = getpass.getpass("Enter your API key: ")

    try:
        with AccountClient(config.api_base) as client:
            message = login_with_api_key(config, api_key, client, config.secure_store())
    except CredentialError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"> {message}")
    return 0
