"""
Core JWT decoding logic.

Splits a JWT into its three segments and decodes the header and payload
into dicts. Signature verification is not performed; the signature is
returned as the raw base64url string.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass

__all__ = [
    "DecodedToken",
    "DecodeError",
    "MalformedTokenError",
    "Base64DecodeError",
    "JSONParseError",
    "split_token",
    "pad_segment",
    "decode_segment",
    "decode_token",
]

logger = logging.getLogger(__name__)

# URL-safe base64 alphabet, padding already stripped.
_B64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")

# Padding to append for each residue of len(segment) % 4. Residue 1 is invalid.
_PADDING = {0: "", 2: "==", 3: "="}

# Integer literals longer than this are rejected (CPython's default int/str limit).
_MAX_INT_DIGITS = 4300


@dataclass
class DecodedToken:
    """Holds the three decoded parts of a JWT token."""

    header: dict
    payload: dict
    signature: str


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DecodeError(Exception):
    """Raised when a JWT token cannot be decoded.

    ``label`` names the failing segment (``"header"`` / ``"payload"``), or is
    ``None`` when the token structure itself is wrong.
    """

    def __init__(self, message: str, label: str | None = None) -> None:
        super().__init__(message)
        self.label = label


class MalformedTokenError(DecodeError):
    """The token does not split into exactly three segments."""


class Base64DecodeError(DecodeError):
    """A segment is not valid base64url."""


class JSONParseError(DecodeError):
    """A decoded segment is not a JSON object."""


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------

def split_token(token: str) -> tuple[str, str, str]:
    """Split *token* on ``'.'`` into (header, payload, signature).

    Raises:
        MalformedTokenError: If the token is empty or does not have exactly
            three segments.
    """
    token = token.strip()

    if not token:
        raise MalformedTokenError("Token is empty.")

    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(
            f"Invalid JWT format. A JWT should have 3 parts separated by dots "
            f"(header.payload.signature), got {len(parts)}."
        )

    header, payload, signature = parts
    return header, payload, signature


# ---------------------------------------------------------------------------
# Segment decoding
# ---------------------------------------------------------------------------

def pad_segment(segment: str, label: str | None = None) -> str:
    """Normalise base64url padding on *segment*.

    Any existing ``=`` padding is discarded and recomputed from the length
    of what remains.

    Raises:
        Base64DecodeError: If the unpadded length leaves a remainder of 1
            modulo 4, which no base64 encoding can produce.
    """
    stripped = segment.rstrip("=")
    residue = len(stripped) % 4
    if residue not in _PADDING:
        raise Base64DecodeError(
            _failure(label, f"invalid base64 length {len(stripped)}"), label
        )
    if len(stripped) != len(segment) or residue:
        logger.debug(
            "Padding %s: %d \"=\" stripped, %d added",
            label or "segment", len(segment) - len(stripped), len(_PADDING[residue]),
        )
    return stripped + _PADDING[residue]


def _failure(label: str | None, detail: object) -> str:
    if label:
        return f"Failed to decode {label}: {detail}"
    return f"Failed to decode segment: {detail}"


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid JSON constant {name!r}")


def _parse_int(text: str) -> int:
    digits = len(text.lstrip("-"))
    if digits > _MAX_INT_DIGITS:
        raise ValueError(f"integer literal of {digits} digits is too large")
    return int(text)


def _b64url_decode(segment: str, label: str | None) -> bytes:
    padded = pad_segment(segment, label)
    if not _B64URL_RE.match(padded.rstrip("=")):
        raise Base64DecodeError(
            _failure(label, "illegal base64url character"), label
        )
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(_failure(label, exc), label) from exc


def decode_segment(segment: str, label: str | None = None) -> dict:
    """Decode a single base64url-encoded JWT segment into a dict.

    Key order of the JSON object is preserved.

    Raises:
        Base64DecodeError: If the segment is not valid base64url.
        JSONParseError: If the decoded bytes are not UTF-8 JSON, or the JSON
            is not an object (or is nested too deeply to parse).
    """
    raw = _b64url_decode(segment, label)
    logger.debug("Decoded %s: %d chars -> %d bytes", label or "segment", len(segment), len(raw))

    try:
        data = json.loads(
            raw.decode("utf-8"), parse_constant=_reject_constant, parse_int=_parse_int
        )
    except UnicodeDecodeError as exc:
        raise JSONParseError(_failure(label, f"not UTF-8 text ({exc})"), label) from exc
    except ValueError as exc:
        raise JSONParseError(_failure(label, exc), label) from exc
    except RecursionError as exc:
        raise JSONParseError(_failure(label, "JSON nested too deeply"), label) from exc

    if not isinstance(data, dict):
        raise JSONParseError(
            _failure(label, f"expected a JSON object, got {type(data).__name__}"),
            label,
        )
    return data


def decode_token(token: str) -> DecodedToken:
    """
    Decode a JWT token string into its three components.

    The token is split on ``'.'`` and the header and payload segments are
    base64url-decoded and parsed as JSON objects. The signature is kept as
    its raw base64url string. Signature verification is **not** performed;
    this is for inspection only.

    Raises:
        DecodeError: If the token is malformed or cannot be decoded.
    """
    header_seg, payload_seg, signature = split_token(token)

    header = decode_segment(header_seg, "header")
    payload = decode_segment(payload_seg, "payload")

    return DecodedToken(header=header, payload=payload, signature=signature)
