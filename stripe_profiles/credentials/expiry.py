"""Key expiry dates: parsing, formatting and staleness."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, timedelta

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Absorbs clock and timezone skew around the recorded date
STALE_GRACE = timedelta(hours=24)


def parse_expiry(value: str | date | datetime | None) -> date | None:
    """
    Parse a stored expiry into a calendar date.

    Accepts ``YYYY-MM-DD`` strings as well as TOML-native dates. Malformed
    values are treated as no known expiry.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        logger.debug(f"Ignoring malformed expiry date: {value!r}")
        return None


def format_expiry(value: date | None) -> str | None:
    """Render an expiry date as ``YYYY-MM-DD``."""
    if value is None:
        return None
    return value.strftime(DATE_FORMAT)


def is_stale(expires_at: date | None, now: datetime | None = None) -> bool:
    """
    Check whether a key is past its expiry.

    A key is stale only once ``now`` is more than 24 hours past midnight of
    the expiry date. No expiry date is never stale.

    Args:
        expires_at: Recorded expiry date
        now: Current time. Defaults to the current UTC time. Aware values
            are compared in UTC; naive values are compared as-is.
    """
    if expires_at is None:
        return False

    if now is None:
        now = datetime.now(UTC)

    boundary = datetime(expires_at.year, expires_at.month, expires_at.day)
    if now.tzinfo is not None:
        boundary = boundary.replace(tzinfo=UTC)

    return now > boundary + STALE_GRACE
