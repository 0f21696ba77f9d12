"""Identity introspection: which profile, account and keys are active."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime

from pydantic import BaseModel

from ..config import Config
from ..credentials import (
    CredentialError,
    CredentialResolver,
    Mode,
    Profile,
    ProfileNotFoundError,
    format_expiry,
    is_stale,
    parse_expiry,
    redact_api_key,
)

logger = logging.getLogger(__name__)


class IdentityRecord(BaseModel):
    """
    Snapshot of the active profile for display.

    Key fields hold redacted values and are only populated when keys were
    requested; unset optional fields are omitted from rendered output.
    """

    project_name: str

    account_id: str | None = None
    display_name: str | None = None
    device_name: str | None = None
    color: str | None = None

    has_test_mode_api_key: bool = False
    has_live_mode_api_key: bool = False
    test_mode_key_expires_at: str | None = None
    live_mode_key_expires_at: str | None = None

    test_mode_api_key: str | None = None
    live_mode_api_key: str | None = None

    profiles_file: str | None = None


def build_identity(
    profile: Profile,
    resolver: CredentialResolver,
    show_keys: bool = False,
    profiles_file: str | None = None,
    color: str | None = None,
) -> IdentityRecord:
    """
    Build the identity record for a profile.

    Args:
        profile: Loaded profile
        resolver: Resolver for the effective keys
        show_keys: Include redacted keys
        profiles_file: Path shown for debugging which file was read
        color: Color override; defaults to the profile's preference
    """
    test_key = resolver.resolve(profile, Mode.TEST)
    live_key = resolver.resolve(profile, Mode.LIVE)

    record = IdentityRecord(
        project_name=profile.project_name,
        account_id=profile.account_id,
        display_name=profile.display_name,
        device_name=resolver.resolve_device_name(profile),
        color=color or profile.color.value,
        has_test_mode_api_key=test_key is not None,
        has_live_mode_api_key=live_key is not None,
        test_mode_key_expires_at=format_expiry(profile.get_expires_at(Mode.TEST)),
        live_mode_key_expires_at=format_expiry(profile.get_expires_at(Mode.LIVE)),
        profiles_file=profiles_file,
    )

    if show_keys:
        if test_key is not None:
            record.test_mode_api_key = redact_api_key(test_key)
        if live_key is not None:
            record.live_mode_api_key = redact_api_key(live_key)

    return record


def render_json(record: IdentityRecord) -> str:
    return json.dumps(record.model_dump(exclude_none=True), indent=2)


def render_text(record: IdentityRecord, now: datetime | None = None) -> str:
    """Render as grep-friendly ``field: value`` lines."""
    lines = [f"project-name: {record.project_name}"]

    for name in ("display_name", "account_id", "device_name", "color"):
        value = getattr(record, name)
        if value:
            lines.append(f"{name}: {value}")

    for mode in (Mode.TEST, Mode.LIVE):
        has_key = getattr(record, f"has_{mode.value}_mode_api_key")
        lines.append(f"has_{mode.value}_mode_api_key: {str(has_key).lower()}")
        expires_at = getattr(record, f"{mode.value}_mode_key_expires_at")
        if expires_at:
            lines.append(f"{mode.value}_mode_key_expires_at: {expires_at}")

    for mode in (Mode.TEST, Mode.LIVE):
        redacted = getattr(record, f"{mode.value}_mode_api_key")
        if redacted:
            lines.append(f"{mode.value}_mode_api_key: {redacted}")

    for mode in (Mode.TEST, Mode.LIVE):
        expires_at = getattr(record, f"{mode.value}_mode_key_expires_at")
        if expires_at and is_stale(parse_expiry(expires_at), now):
            lines.append(
                f"warning: {mode.value}_mode_api_key appears expired (re-login may be required)"
            )

    return "\n".join(lines) + "\n"


def register_commands(subparsers: argparse._SubParsersAction) -> None:
    """Register the whoami command with the main CLI."""
    whoami_parser = subparsers.add_parser(
        "whoami",
        help="Show the currently selected profile",
        description=(
            "Print which profile you are operating against "
            "(project, account, display name, device, and key expiry)."
        ),
    )
    whoami_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    whoami_parser.add_argument(
        "--show-keys",
        action="store_true",
        help="Include redacted API keys in output",
    )
    whoami_parser.set_defaults(func=cmd_whoami)


def cmd_whoami(args: argparse.Namespace) -> int:
    """Show the active profile."""
    config = Config.from_args(args)
    resolver = CredentialResolver(config.secure_store())

    try:
        profile = config.profile_store().load(config.project_name)
    except ProfileNotFoundError as e:
        if resolver.env_override(Mode.TEST) is None and resolver.env_override(Mode.LIVE) is None:
            print(
                f"Error: no active profile found (try `login` or check your config): {e}",
                file=sys.stderr,
            )
            return 1
        logger.debug(f"{e}; reporting environment keys only")
        profile = Profile(project_name=config.project_name)
    except CredentialError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    record = build_identity(
        profile,
        resolver,
        show_keys=args.show_keys,
        profiles_file=str(config.profiles_file),
        color=config.color.value if config.color else None,
    )

    if args.json:
        print(render_json(record))
    else:
        print(render_text(record), end="")
    return 0
