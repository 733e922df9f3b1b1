"""
Expiry check for the ``exp`` claim.

The decision is made here and rendered elsewhere, so it can be tested
against a fixed clock without capturing output.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, tzinfo

from .models import ExpiryResult, ExpiryStatus
from .timestamps import epoch_to_datetime

__all__ = ["check_expiry", "format_duration"]


def _now_seconds(now: float | datetime | None) -> float:
    if now is None:
        return time.time()
    if isinstance(now, datetime):
        return now.timestamp()
    return float(now)


def _round_seconds(seconds: float) -> int:
    """Round a non-negative duration to whole seconds, halves rounding up."""
    return int(math.floor(seconds + 0.5))


def check_expiry(
    claims: dict,
    now: float | datetime | None = None,
    tz: tzinfo | None = None,
) -> ExpiryResult:
    """Compare the ``exp`` claim in *claims* against *now*.

    *now* is epoch seconds or an aware datetime; the current time is used
    when omitted. A token is expired from the exact second of ``exp`` on.
    Missing or malformed ``exp`` values are reported through the result
    status, never raised.
    """
    if "exp" not in claims:
        return ExpiryResult(ExpiryStatus.NO_CLAIM)

    exp = claims["exp"]
    expires_at = epoch_to_datetime(exp, tz)
    if expires_at is None:
        return ExpiryResult(ExpiryStatus.INVALID_FORMAT)

    elapsed = _now_seconds(now) - int(exp)
    if elapsed >= 0:
        return ExpiryResult(ExpiryStatus.EXPIRED, expires_at, _round_seconds(elapsed))
    return ExpiryResult(ExpiryStatus.VALID, expires_at, _round_seconds(-elapsed))


def format_duration(seconds: int) -> str:
    """Format a whole-second duration compactly: ``45s``, ``8m20s``, ``26h0m5s``."""
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m{secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m{secs}s"
