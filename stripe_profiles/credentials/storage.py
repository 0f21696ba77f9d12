"""
Secure storage backends for live mode keys.

This module provides abstract and concrete secure store implementations:
- SecureStore: Abstract base class
- KeyringSecureStore: OS keychain via the ``keyring`` library (default)
- InMemorySecureStore: For testing

Only the live mode key of a profile is ever stored here, under
``<project_name>.live_mode_api_key``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import keyring
import keyring.errors

from .models import SecureStoreError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "Stripe CLI"
LIVE_KEY_SUFFIX = "live_mode_api_key"


def live_key_name(project_name: str) -> str:
    """Secure store item name holding a profile's live mode key."""
    return f"{project_name}.{LIVE_KEY_SUFFIX}"


class SecureStore(ABC):
    """
    Abstract secret store.

    Implementations must provide get, set and delete. ``get`` must not raise
    for backend failures: an unavailable store reads as an absent secret.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read a secret.

        Args:
            key: Namespaced item name

        Returns:
            The secret, or None if absent or the backend is unavailable
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a secret.

        Raises:
            SecureStoreError: If the backend rejects the write
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a secret.

        Returns:
            True if the secret existed and was deleted, False otherwise
        """
        pass


class KeyringSecureStore(SecureStore):
    """
    Secure store backed by the platform keychain.

    Uses the ``keyring`` library which maps to macOS Keychain, Windows
    Credential Manager, or the Secret Service API on Linux.

    Example:
        store = KeyringSecureStore()
        store.set(live_key_name("default"), "rk_live_xxx")
        value = store.get(live_key_name("default"))
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        """
        Initialize keyring storage.

        Args:
            service_name: Keyring service all items are filed under
        """
        self._service = service_name

    def get(self, key: str) -> str | None:
        """Read from the keychain, degrading backend errors to None."""
        try:
            value = keyring.get_password(self._service, key)
        except Exception as e:
            logger.warning(f"Secure store unavailable, treating '{key}' as absent: {e}")
            return None
        return value or None

    def set(self, key: str, value: str) -> None:
        """Write to the keychain."""
        try:
            keyring.set_password(self._service, key, value)
        except keyring.errors.KeyringError as e:
            raise SecureStoreError(f"Failed to store '{key}' in secure store: {e}") from e
        logger.debug(f"Stored '{key}' in secure store")

    def delete(self, key: str) -> bool:
        """Remove from the keychain."""
        try:
            keyring.delete_password(self._service, key)
        except keyring.errors.PasswordDeleteError:
            return False
        except keyring.errors.KeyringError as e:
            raise SecureStoreError(f"Failed to delete '{key}' from secure store: {e}") from e
        logger.debug(f"Deleted '{key}' from secure store")
        return True


class InMemorySecureStore(SecureStore):
    """
    In-memory secure store for testing.

    Items are kept in a dictionary and lost when the process exits.

    Example:
        store = InMemorySecureStore({"test.live_mode_api_key": "rk_live_xxx"})
        store.get("test.live_mode_api_key")
    """

    def __init__(self, initial_data: dict[str, str] | None = None):
        """
        Initialize in-memory storage.

        Args:
            initial_data: Optional dict of item name -> secret
        """
        self._data: dict[str, str] = dict(initial_data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key) or None

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        if key in self._data:
            del self._data[key]
            return True
        return False

    def clear(self) -> None:
        """Remove all items."""
        self._data.clear()
