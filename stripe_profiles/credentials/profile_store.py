"""
Plaintext profiles file persistence.

The profiles file is a TOML document with one table per profile:

    [default]
    account_id = "acct_123"
    display_name = "Alice"
    test_mode_api_key = "sk_test_xxx"
    test_mode_key_expires_at = "2099-01-02"
    live_mode_key_expires_at = "2099-02-03"

``live_mode_api_key`` never appears in this file. Writes replace the named
table only and go through a temporary file plus an atomic rename, so a failed
write leaves the previous file untouched.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import SecretStr, ValidationError

from .expiry import parse_expiry
from .models import Profile, ProfileNotFoundError, ProfileStoreError
from .storage import SecureStore, live_key_name

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o700


class ProfileStore:
    """
    Reads and writes named profiles in the plaintext profiles file.

    Example:
        store = ProfileStore("~/.config/stripe/config.toml")
        store.create_profile(profile)
        profile = store.load("default", secure_store=KeyringSecureStore())
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store.

        Args:
            path: Location of the profiles file
        """
        self.path = Path(path).expanduser()

    # --- Reading ---

    def _read(self) -> dict[str, Any] | None:
        """Parse the profiles file, or None if it doesn't exist."""
        try:
            with open(self.path, "rb") as f:
                return tomllib.load(f)
        except FileNotFoundError:
            return None
        except tomllib.TOMLDecodeError as e:
            raise ProfileStoreError(f"Profiles file {self.path} is not valid TOML: {e}") from e
        except OSError as e:
            raise ProfileStoreError(f"Failed to read profiles file {self.path}: {e}") from e

    def list_profiles(self) -> list[str]:
        """List the profile names present in the file."""
        document = self._read() or {}
        return [name for name, value in document.items() if isinstance(value, dict)]

    def load(self, project_name: str, secure_store: SecureStore | None = None) -> Profile:
        """
        Load a profile by name.

        Args:
            project_name: Section to read
            secure_store: If given, the live mode key is filled in from it

        Returns:
            The profile

        Raises:
            ProfileNotFoundError: If the file or the section doesn't exist
            ProfileStoreError: If the file can't be parsed
        """
        document = self._read()
        if document is None:
            raise ProfileNotFoundError(f"Profiles file not found: {self.path}")

        section = document.get(project_name)
        if not isinstance(section, dict):
            raise ProfileNotFoundError(f"Profile '{project_name}' not found in {self.path}")

        if "live_mode_api_key" in section:
            logger.warning(
                f"Ignoring live_mode_api_key in {self.path} [{project_name}]; "
                "live mode keys are only read from the secure store"
            )

        # a profile named "color" is a table, not the file-wide default
        default_color = document.get("color")
        if not isinstance(default_color, str):
            default_color = None
        fields = {"color": section["color"]} if "color" in section else {}

        try:
            profile = Profile(
                project_name=project_name,
                account_id=section.get("account_id") or None,
                display_name=section.get("display_name") or None,
                device_name=section.get("device_name") or None,
                test_mode_api_key=section.get("test_mode_api_key") or None,
                test_mode_key_expires_at=parse_expiry(section.get("test_mode_key_expires_at")),
                live_mode_key_expires_at=parse_expiry(section.get("live_mode_key_expires_at")),
                **fields,
            )
            if "color" not in section and default_color is not None:
                profile.inherit_color(default_color)
        except (ValidationError, ValueError) as e:
            raise ProfileStoreError(f"Invalid profile '{project_name}' in {self.path}: {e}") from e

        if secure_store is not None:
            live_key = secure_store.get(live_key_name(project_name))
            if live_key:
                profile.live_mode_api_key = SecretStr(live_key)

        return profile

    # --- Writing ---

    def create_profile(self, profile: Profile) -> None:
        """
        Write a profile's plaintext fields, replacing its section.

        Other sections and top-level keys are preserved. The live mode key is
        never written; store it with SecureStore.set.

        Raises:
            ProfileStoreError: If the file can't be read or written
        """
        document = self._read() or {}
        document[profile.project_name] = profile.plaintext_record()
        self._write(document)
        logger.debug(f"Saved profile '{profile.project_name}' to {self.path}")

    def delete_profile(self, project_name: str, secure_store: SecureStore | None = None) -> bool:
        """
        Remove a profile's section from the file.

        Args:
            project_name: Section to remove
            secure_store: If given, the profile's live mode key is deleted from
                it as well

        Returns:
            True if the section existed and was removed, False otherwise
        """
        if secure_store is not None:
            secure_store.delete(live_key_name(project_name))

        document = self._read()
        if not document or not isinstance(document.get(project_name), dict):
            return False
        del document[project_name]
        self._write(document)
        logger.debug(f"Deleted profile '{project_name}' from {self.path}")
        return True

    def _write(self, document: dict[str, Any]) -> None:
        """Atomically replace the profiles file with ``document``."""
        try:
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            if self.path.exists():
                mode = stat.S_IMODE(self.path.stat().st_mode)
            else:
                mode = FILE_MODE

            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise ProfileStoreError(f"Failed to prepare profiles file {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                tomli_w.dump(document, f)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, self.path)
        except Exception as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise ProfileStoreError(f"Failed to write profiles file {self.path}: {e}") from e
