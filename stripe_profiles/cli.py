"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys

from .commands import COMMAND_MODULES
from .credentials import DotenvError, EnvIngestor, IngestStatus

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stripe-profiles",
        description="Manage and inspect API credential profiles.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Profiles file (default: $XDG_CONFIG_HOME/stripe/config.toml)",
    )
    parser.add_argument(
        "--project-name",
        "-p",
        type=str,
        default=None,
        help="The project name to read from for config (default: default)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default=None,
        help="Override the color preference",
    )
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS),
        default="warning",
        help="Log level (default: warning)",
    )
    parser.add_argument(
        "--api-base",
        type=str,
        default=None,
        help="API base URL used to verify keys",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Load allow-listed variables from this file (must not be world-readable)",
    )
    parser.add_argument(
        "--dotenv",
        action="store_true",
        help="Load allow-listed variables from ./.env (must not be world-readable)",
    )

    subparsers = parser.add_subparsers(dest="command")
    for module in COMMAND_MODULES:
        module.register_commands(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVELS[args.log_level], format="%(message)s")

    try:
        outcome = EnvIngestor().ingest(env_file=args.env_file, dotenv=args.dotenv)
    except DotenvError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.dotenv and outcome.status is IngestStatus.LOADED:
        print(f"Loaded environment variables from {outcome.path}")

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
