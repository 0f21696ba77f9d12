"""
Effective credential resolution for a profile.

Precedence for a mode, highest first:
1. Environment override (STRIPE_API_KEY, then STRIPE_SECRET_KEY) whose key
   belongs to the requested mode
2. LIVE: the secure store item ``<project_name>.live_mode_api_key``
3. TEST: the profile's plaintext ``test_mode_api_key``

There is no fallback between modes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from .models import Mode, Profile, key_mode
from .storage import SecureStore, live_key_name

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("STRIPE_API_KEY", "STRIPE_SECRET_KEY")
DEVICE_NAME_ENV_VAR = "STRIPE_DEVICE_NAME"


class CredentialResolver:
    """
    Resolves the active key for a profile and mode.

    Usage:
        resolver = CredentialResolver(KeyringSecureStore())
        key = resolver.resolve(profile, Mode.LIVE)
        if key is None:
            print("no live mode key configured")
    """

    def __init__(self, secure_store: SecureStore, environ: Mapping[str, str] | None = None):
        """
        Initialize the resolver.

        Args:
            secure_store: Store holding live mode keys
            environ: Environment to read overrides from. Defaults to os.environ.
        """
        self._secure_store = secure_store
        self._environ = os.environ if environ is None else environ

    def env_override(self, mode: Mode) -> str | None:
        """Get the environment override for a mode, if one is set."""
        for name in API_KEY_ENV_VARS:
            value = self._environ.get(name, "")
            if value and key_mode(value) is mode:
                logger.debug(f"Using {mode.value} mode key from {name}")
                return value
        return None

    def resolve(self, profile: Profile, mode: Mode) -> str | None:
        """
        Get the active key for a mode.

        Args:
            profile: Profile to resolve against
            mode: Tier to resolve

        Returns:
            The key, or None when no credential is configured for the mode
        """
        override = self.env_override(mode)
        if override is not None:
            return override

        if mode is Mode.LIVE:
            return self._secure_store.get(live_key_name(profile.project_name))

        return profile.get_api_key(Mode.TEST)

    def has_key(self, profile: Profile, mode: Mode) -> bool:
        """Check whether a mode has an active key."""
        return self.resolve(profile, mode) is not None

    def resolve_device_name(self, profile: Profile) -> str | None:
        """Get the device name, preferring the STRIPE_DEVICE_NAME override."""
        return self._environ.get(DEVICE_NAME_ENV_VAR) or profile.device_name
