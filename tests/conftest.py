"""Shared fixtures for CLI tests."""

import pytest

from stripe_profiles.config import Config
from stripe_profiles.credentials import InMemorySecureStore

STRIPE_ENV_VARS = (
    "STRIPE_API_KEY",
    "STRIPE_SECRET_KEY",
    "STRIPE_DEVICE_NAME",
    "STRIPE_PROJECT_NAME",
    "STRIPE_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Isolate tests from the caller's environment and ./.env.

    Every CLI run auto-loads ./.env, so tests run from an empty temp dir.
    """
    for name in STRIPE_ENV_VARS:
        # setenv first so teardown also removes values the CLI writes
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def secure_store(monkeypatch):
    """In-memory secure store wired into every Config."""
    store = InMemorySecureStore()
    monkeypatch.setattr(Config, "secure_store", lambda self: store)
    return store
