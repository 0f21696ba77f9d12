"""
Key-based login.

Configures a profile from a user-provided API key without the browser pairing
flow, so it works in headless environments (Docker, CI). Test mode keys go to
the profiles file; live mode keys go to the secure store only.
"""

from __future__ import annotations

import logging
import socket

from ..config import Config
from ..credentials import (
    Mode,
    Profile,
    ProfileNotFoundError,
    SecureStore,
    key_mode,
    live_key_name,
    validate_api_key,
)
from .account import Account, AccountClient, AccountClientError

logger = logging.getLogger(__name__)


def success_message(account: Account) -> str:
    """Message shown once the stored key has been verified."""
    display_name = account.display_name or "<unnamed account>"
    return f"Done! The Stripe CLI is configured for {display_name} with account id {account.id}"


def _default_device_name() -> str:
    try:
        return socket.gethostname() or "unknown"
    except OSError:
        return "unknown"


def login_with_api_key(
    config: Config,
    api_key: str,
    account_client: AccountClient,
    secure_store: SecureStore,
    hostname: str | None = None,
) -> str:
    """
    Store an API key on the configured profile.

    Args:
        config: Runtime configuration (profiles file, project name)
        api_key: Key provided by the user
        account_client: Client used to label and verify the key
        secure_store: Destination for live mode keys
        hostname: Device name to record if the profile has none

    Returns:
        A message for the user. Verification failures are reported in the
        message rather than raised; the key is stored either way.

    Raises:
        CredentialValidationError: If the key is malformed
        ProfileStoreError: If the profiles file can't be written
        SecureStoreError: If a live mode key can't be stored
    """
    api_key = api_key.strip()
    validate_api_key(api_key)

    store = config.profile_store()
    try:
        profile = store.load(config.project_name)
    except ProfileNotFoundError:
        profile = Profile(project_name=config.project_name)

    if not (profile.device_name or "").strip():
        profile.device_name = hostname or _default_device_name()

    account: Account | None = None
    verify_error: AccountClientError | None = None
    try:
        account = account_client.get_account(api_key)
    except AccountClientError as e:
        logger.debug(f"Account lookup failed during login: {e}")
        verify_error = e

    if account is not None:
        profile.account_id = account.id or profile.account_id
        profile.display_name = account.display_name or profile.display_name

    mode = key_mode(api_key)
    if mode is Mode.LIVE:
        secure_store.set(live_key_name(profile.project_name), api_key)
    profile.set_api_key(mode, api_key)

    store.create_profile(profile)
    logger.info(f"Stored {mode.value} mode key for profile '{profile.project_name}'")

    if verify_error is not None:
        return f"Error verifying the CLI was set up successfully: {verify_error}"
    return success_message(account)
