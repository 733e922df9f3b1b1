"""
Human-readable rendering of the standard JWT time claims (iat, exp, nbf).
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any

from .models import TIMESTAMP_CLAIMS, is_numeric

__all__ = [
    "collect_timestamps",
    "epoch_to_datetime",
    "format_timestamp",
    "has_timestamp_claims",
]

# Fixed English names so output does not depend on the process locale.
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def epoch_to_datetime(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Convert a numeric claim to an aware datetime in *tz* (local when None).

    The value is truncated to whole seconds. Returns None for non-numeric
    values and for instants the platform cannot represent.
    """
    if not is_numeric(value):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc).astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(dt: datetime) -> str:
    """Format *dt* as RFC 1123, e.g. ``Mon, 15 Jan 2018 01:30:22 UTC``."""
    return (
        f"{_DAYS[dt.weekday()]}, {dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year:04d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} {dt.tzname() or ''}"
    ).rstrip()


def collect_timestamps(claims: dict, tz: tzinfo | None = None) -> list[tuple[str, datetime]]:
    """Return ``(label, datetime)`` for each recognised time claim in *claims*.

    Order is always Issued At, Expires At, Not Before. Claims with
    non-numeric values are skipped.
    """
    found: list[tuple[str, datetime]] = []
    for claim, label in TIMESTAMP_CLAIMS:
        if claim not in claims:
            continue
        dt = epoch_to_datetime(claims[claim], tz)
        if dt is not None:
            found.append((label, dt))
    return found


def has_timestamp_claims(claims: dict) -> bool:
    """True if any recognised time claim is present, whatever its value."""
    return any(claim in claims for claim, _ in TIMESTAMP_CLAIMS)
