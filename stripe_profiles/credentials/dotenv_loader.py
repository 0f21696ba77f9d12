"""
Permission-gated ingestion of env files into the process environment.

Only an allow-list of variable names is imported, and a variable that is
already set is never overridden.

Whether a problem is fatal depends on who asked for the file:

    explicit (--env-file / --dotenv)   missing or world-readable -> DotenvError
    implicit (auto-load of ./.env)     missing -> no-op
                                       world-readable -> warning, skipped

Usage:
    ingestor = EnvIngestor()
    outcome = ingestor.ingest(env_file=args.env_file, dotenv=args.dotenv)
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dotenv import dotenv_values

from .models import DotenvError

logger = logging.getLogger(__name__)

ALLOWLIST = (
    "STRIPE_SECRET_KEY",
    "STRIPE_DEVICE_NAME",
)
DEFAULT_ENV_FILE = ".env"


class IngestStatus(str, Enum):
    """What ingestion did with the env file."""

    LOADED = "loaded"
    MISSING = "missing"
    INSECURE = "insecure"
    UNREADABLE = "unreadable"


@dataclass
class IngestOutcome:
    """Result of an ingestion attempt."""

    status: IngestStatus
    path: str
    explicit: bool = False
    loaded: list[str] = field(default_factory=list)
    """Names actually written to the environment."""


def is_world_readable(mode: int) -> bool:
    """Check the "others" read bit of a file mode."""
    return bool(mode & stat.S_IROTH)


class EnvIngestor:
    """
    Loads allow-listed variables from an env file under a permission policy.

    The environment mapping is injectable so the decision table can be
    exercised without touching ``os.environ``.
    """

    def __init__(
        self,
        allowlist: tuple[str, ...] = ALLOWLIST,
        default_path: str | Path = DEFAULT_ENV_FILE,
        environ: MutableMapping[str, str] | None = None,
    ):
        """
        Initialize the ingestor.

        Args:
            allowlist: Variable names that may be imported
            default_path: File used when no explicit path is given
            environ: Environment to populate. Defaults to os.environ.
        """
        self._allowlist = allowlist
        self._default_path = str(default_path)
        self._environ = os.environ if environ is None else environ

    def decide(self, path: str, explicit: bool) -> IngestStatus:
        """
        Apply the permission policy to a file without reading it.

        Args:
            path: File to check
            explicit: Whether the user asked for this file

        Returns:
            LOADED if the file should be read, otherwise why it is skipped

        Raises:
            DotenvError: If the file was explicitly requested and can't be used
        """
        try:
            mode = os.stat(path).st_mode
        except FileNotFoundError:
            if explicit:
                raise DotenvError(f"failed to load {path}: file not found", path) from None
            return IngestStatus.MISSING
        except OSError as e:
            if explicit:
                raise DotenvError(f"failed to stat {path}: {e}", path) from e
            logger.warning(f"Skipping {path}: {e}")
            return IngestStatus.UNREADABLE

        if is_world_readable(mode):
            logger.warning(
                f"Skipping {path}: file permissions {oct(stat.S_IMODE(mode))} are too "
                f"permissive (world-readable). Run 'chmod 600 {path}' to fix this."
            )
            if explicit:
                raise DotenvError(
                    f"{path} has insecure permissions (world-readable). "
                    f"Run 'chmod 600 {path}' to fix this",
                    path,
                )
            return IngestStatus.INSECURE

        return IngestStatus.LOADED

    def ingest(self, env_file: str | None = None, dotenv: bool = False) -> IngestOutcome:
        """
        Load the env file selected by the flags.

        Args:
            env_file: Explicit file path (--env-file)
            dotenv: Explicitly load the default file (--dotenv)

        Returns:
            The outcome, including which variables were set

        Raises:
            DotenvError: Only when the file was explicitly requested
        """
        explicit = env_file is not None or dotenv
        path = env_file if env_file is not None else self._default_path

        status = self.decide(path, explicit)
        outcome = IngestOutcome(status=status, path=path, explicit=explicit)
        if status is not IngestStatus.LOADED:
            return outcome

        try:
            values = dotenv_values(path)
        except (OSError, UnicodeDecodeError) as e:
            if explicit:
                raise DotenvError(f"failed to load {path}: {e}", path) from e
            logger.warning(f"Skipping {path}: {e}")
            outcome.status = IngestStatus.UNREADABLE
            return outcome

        for name in self._allowlist:
            value = values.get(name)
            if value is None or name in self._environ:
                continue
            self._environ[name] = value
            outcome.loaded.append(name)

        logger.debug(f"Loaded environment variables from {path}: {', '.join(outcome.loaded)}")
        return outcome
