"""
Core data models for profile credentials.

A profile is one named credential set: an account identity plus two key tiers.
Test mode keys may be written to the plaintext profiles file. Live mode keys
live only in the OS secure store or in an environment override, and the model
makes that structural: ``live_mode_api_key`` is excluded from every dump, so
nothing that serializes a Profile can emit it.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, SecretStr


class Mode(str, Enum):
    """Credential tiers a profile can hold."""

    TEST = "test"
    """Sandbox tier, storable in plaintext"""

    LIVE = "live"
    """Production tier, secure store or environment only"""


class ColorPreference(str, Enum):
    """Terminal color setting recorded on a profile."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def key_mode(api_key: str) -> Mode:
    """
    Classify a key string by its mode segment.

    ``sk_live_...`` and ``rk_live_...`` are LIVE; everything else, including
    keys without a recognizable segment, is treated as TEST.
    """
    parts = api_key.split("_")
    if len(parts) >= 3 and parts[1] == Mode.LIVE.value:
        return Mode.LIVE
    return Mode.TEST


class Profile(BaseModel):
    """
    One named credential set.

    Example:
        Profile(
            project_name="default",
            account_id="acct_123",
            test_mode_api_key=SecretStr("sk_test_xxx"),
        )

    Attributes:
        project_name: Section name in the profiles file
        account_id: Remote account identifier
        display_name: Human-readable account name
        device_name: Name of the machine the profile was created on
        test_mode_api_key: Sandbox key (plaintext-storable)
        live_mode_api_key: Production key (never serialized)
        test_mode_key_expires_at: Calendar expiry of the sandbox key
        live_mode_key_expires_at: Calendar expiry of the production key
        color: Color preference
    """

    project_name: str = Field(description="Profile section name (e.g., 'default')")

    account_id: str | None = None
    display_name: str | None = None
    device_name: str | None = None

    test_mode_api_key: SecretStr | None = None
    live_mode_api_key: SecretStr | None = Field(default=None, exclude=True, repr=False)

    test_mode_key_expires_at: date | None = None
    live_mode_key_expires_at: date | None = None

    color: ColorPreference = ColorPreference.AUTO

    model_config = {"extra": "ignore"}

    # file-wide default the color was taken from, if any; not written back
    _inherited_color: ColorPreference | None = PrivateAttr(default=None)

    def inherit_color(self, color: ColorPreference | str) -> None:
        """Apply a file-wide color default without pinning it to this profile."""
        self.color = ColorPreference(color)
        self._inherited_color = self.color

    def get_api_key(self, mode: Mode) -> str | None:
        """
        Get the in-memory key for a tier.

        This does not consult the environment or the secure store; use
        CredentialResolver for the effective key.
        """
        secret = self.live_mode_api_key if mode is Mode.LIVE else self.test_mode_api_key
        if secret is None:
            return None
        return secret.get_secret_value() or None

    def set_api_key(self, mode: Mode, value: str, expires_at: date | None = None) -> None:
        """
        Set the key and its expiry for a tier.

        Args:
            mode: Tier to update
            value: Raw key
            expires_at: Optional calendar expiry
        """
        if mode is Mode.LIVE:
            self.live_mode_api_key = SecretStr(value)
            self.live_mode_key_expires_at = expires_at
        else:
            self.test_mode_api_key = SecretStr(value)
            self.test_mode_key_expires_at = expires_at

    def get_expires_at(self, mode: Mode) -> date | None:
        """Get the recorded expiry for a tier, if any."""
        if mode is Mode.LIVE:
            return self.live_mode_key_expires_at
        return self.test_mode_key_expires_at

    def plaintext_record(self) -> dict[str, Any]:
        """
        Build the profiles-file section body for this profile.

        Only test-tier and descriptive fields appear. Dates are rendered as
        ``YYYY-MM-DD`` strings and unset fields are dropped. A color inherited
        from the file-wide default is not written.
        """
        data = self.model_dump(
            mode="json", exclude={"project_name", "color"}, exclude_defaults=True
        )

        # SecretStr dumps as "**********" in json mode
        if "test_mode_api_key" in data:
            data["test_mode_api_key"] = self.test_mode_api_key.get_secret_value()

        if "color" in self.model_fields_set and self.color is not self._inherited_color:
            data["color"] = self.color.value

        return data


class CredentialError(Exception):
    """Base exception for credential-related errors."""

    pass


class CredentialValidationError(CredentialError):
    """Raised when a key is malformed. The message never contains the key."""

    pass


class ProfileStoreError(CredentialError):
    """Raised when the profiles file cannot be read or written."""

    pass


class ProfileNotFoundError(ProfileStoreError):
    """Raised when the profiles file or the requested section doesn't exist."""

    pass


class SecureStoreError(CredentialError):
    """Raised when a secret cannot be written to the secure store."""

    pass


class DotenvError(CredentialError):
    """
    Raised when an explicitly requested env file violates the ingestion policy.

    Fatal at the process boundary.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
