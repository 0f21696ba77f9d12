"""CLI commands."""

from . import login, whoami

COMMAND_MODULES = (login, whoami)

__all__ = ["COMMAND_MODULES", "login", "whoami"]
