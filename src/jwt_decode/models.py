"""
Shared data models and constants used across the jwt-decode package.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

__all__ = [
    "JsonKind",
    "json_kind",
    "is_numeric",
    "TIMESTAMP_CLAIMS",
    "ExpiryStatus",
    "ExpiryResult",
]


# ------------------------------------------------------------------
# JSON value tags
# ------------------------------------------------------------------

class JsonKind(Enum):
    """Tag for a decoded JSON value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    """Return the JSON tag of a value produced by :func:`json.loads`.

    ``bool`` is checked before ``int`` because it is a subclass of it.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_numeric(value: Any) -> bool:
    """True for finite JSON numbers (booleans excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


# ------------------------------------------------------------------
# Recognised time claims (display order)
# ------------------------------------------------------------------

TIMESTAMP_CLAIMS: tuple[tuple[str, str], ...] = (
    ("iat", "Issued At"),
    ("exp", "Expires At"),
    ("nbf", "Not Before"),
)


# ------------------------------------------------------------------
# Expiry check result
# ------------------------------------------------------------------

class ExpiryStatus(Enum):
    NO_CLAIM = "no-claim"
    INVALID_FORMAT = "invalid-format"
    EXPIRED = "expired"
    VALID = "valid"


@dataclass(frozen=True)
class ExpiryResult:
    """Outcome of comparing a payload's ``exp`` claim against a clock."""
    status: ExpiryStatus
    expires_at: datetime | None = None   # Set for EXPIRED / VALID
    delta_seconds: int | None = None     # Elapsed (EXPIRED) or remaining (VALID)
