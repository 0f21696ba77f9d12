"""Runtime configuration."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path

from .credentials import ColorPreference, KeyringSecureStore, ProfileStore, SecureStore

DEFAULT_PROJECT_NAME = "default"
DEFAULT_API_BASE = "https://api.stripe.com"


def default_profiles_file() -> Path:
    """
    Locate the profiles file.

    STRIPE_CONFIG_FILE wins, then $XDG_CONFIG_HOME/stripe/config.toml, then
    ~/.config/stripe/config.toml.
    """
    explicit = os.environ.get("STRIPE_CONFIG_FILE")
    if explicit:
        return Path(explicit).expanduser()

    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "stripe" / "config.toml"


def default_project_name() -> str:
    return os.environ.get("STRIPE_PROJECT_NAME") or DEFAULT_PROJECT_NAME


@dataclass
class Config:
    profiles_file: Path = field(default_factory=default_profiles_file)
    project_name: str = field(default_factory=default_project_name)
    color: ColorPreference | None = None
    """Overrides the profile's stored color preference when set."""
    log_level: str = "warning"
    api_base: str = DEFAULT_API_BASE

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Config:
        """Build from the global CLI flags, falling back to defaults."""
        config = cls()
        if getattr(args, "config", None):
            config.profiles_file = Path(args.config).expanduser()
        if getattr(args, "project_name", None):
            config.project_name = args.project_name
        if getattr(args, "color", None):
            config.color = ColorPreference(args.color)
        if getattr(args, "log_level", None):
            config.log_level = args.log_level
        if getattr(args, "api_base", None):
            config.api_base = args.api_base
        return config

    def profile_store(self) -> ProfileStore:
        return ProfileStore(self.profiles_file)

    def secure_store(self) -> SecureStore:
        return KeyringSecureStore()
