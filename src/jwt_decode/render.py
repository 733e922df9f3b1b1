"""
Terminal output for decoded tokens.

All styling goes through an explicit :class:`Theme`; a plain theme yields
output with no ANSI escape sequences at all.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, TextIO

from .expiry import format_duration
from .models import ExpiryResult, ExpiryStatus, JsonKind, json_kind
from .timestamps import collect_timestamps, format_timestamp, has_timestamp_claims

__all__ = [
    "Theme",
    "Renderer",
    "resolve_color",
    "print_error",
]

RULE = "═" * 63
INDENT = "  "

# ANSI SGR sequences
RESET = "\033[0m"
BOLD = "\033[1m"
BOLD_CYAN = "\033[1;36m"
YELLOW = "\033[33m"
GREEN = "\033[32m"
MAGENTA = "\033[35m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM_ITALIC = "\033[2;3m"
BOLD_GREEN = "\033[1;32m"
BOLD_RED = "\033[1;31m"


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Theme:
    """Style prefix per output element. Empty strings mean unstyled."""

    title: str = ""
    key: str = ""
    string: str = ""
    number: str = ""
    boolean: str = ""
    null: str = ""
    punctuation: str = ""
    signature: str = ""
    muted: str = ""
    valid: str = ""
    expired: str = ""
    error: str = ""

    @classmethod
    def plain(cls) -> "Theme":
        return cls()

    @classmethod
    def colored(cls) -> "Theme":
        return cls(
            title=BOLD_CYAN,
            key=YELLOW,
            string=GREEN,
            number=MAGENTA,
            boolean=BLUE,
            null=DIM_ITALIC,
            punctuation=BOLD,
            signature=RED,
            muted=DIM_ITALIC,
            valid=BOLD_GREEN,
            expired=BOLD_RED,
            error=BOLD_RED,
        )

    @classmethod
    def for_color(cls, enabled: bool) -> "Theme":
        return cls.colored() if enabled else cls.plain()

    def paint(self, text: str, style: str) -> str:
        if not style:
            return text
        return f"{style}{text}{RESET}"


def resolve_color(mode: str, stream: TextIO) -> bool:
    """Decide whether to emit ANSI styling on *stream*.

    ``always`` / ``never`` are taken literally. ``auto`` enables color only
    for a TTY, and never when the ``NO_COLOR`` environment variable is set.
    """
    if mode == "always":
        return True
    if mode == "never":
        return False
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:  # closed stream
        return False


def print_error(message: str, theme: Theme, stream: TextIO | None = None) -> None:
    """Write a single ``Error: <message>`` line to *stream* (stderr)."""
    stream = stream if stream is not None else sys.stderr
    stream.write(theme.paint(f"Error: {message}", theme.error) + "\n")


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

class Renderer:
    """Writes titled token sections to an output stream."""

    def __init__(
        self,
        theme: Theme,
        out: TextIO | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.theme = theme
        self.out = out if out is not None else sys.stdout
        self.tz = tz

    # -- low-level -----------------------------------------------------------

    def _line(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def blank(self) -> None:
        self._line()

    def banner(self, title: str) -> None:
        style = self.theme.title
        self._line(self.theme.paint(RULE, style))
        self._line(self.theme.paint(f"{INDENT}{title}", style))
        self._line(self.theme.paint(RULE, style))

    # -- JSON ----------------------------------------------------------------

    def format_json(self, value: Any) -> str:
        """Pretty-print *value* with two-space indentation.

        Styling is chosen from the value's JSON kind. With a plain theme
        the result equals ``json.dumps(value, indent=2, ensure_ascii=False)``.
        """
        return _walk_json(value, self.theme, compact=False)

    # -- sections ------------------------------------------------------------

    def section(self, title: str, claims: dict, raw: bool = False, annotate: bool = False) -> None:
        """Render one decoded segment under a titled banner.

        Raw mode prints compact single-line JSON without any styling. In
        pretty mode *annotate* appends the human-readable time claims.
        """
        self.banner(title)
        if raw:
            self._line(_walk_json(claims, Theme.plain(), compact=True))
            return

        self._line(self.format_json(claims))
        if annotate:
            self.timestamps(claims)

    def timestamps(self, claims: dict) -> None:
        if not has_timestamp_claims(claims):
            return
        muted = self.theme.muted
        self.blank()
        self._line(self.theme.paint(f"{INDENT}── Timestamps (Human Readable) ──", muted))
        for label, dt in collect_timestamps(claims, self.tz):
            self._line(self.theme.paint(f"{INDENT}{label}: {format_timestamp(dt)}", muted))

    def signature(self, signature: str) -> None:
        """Show the raw signature. It is never decoded or verified."""
        t = self.theme
        self.banner("SIGNATURE")
        self._line(t.paint(f"{INDENT}{signature}", t.signature))
        self.blank()
        self._line(t.paint(f"{INDENT}⚠ Note: This tool does not verify the signature.", t.muted))
        self._line(t.paint(f"{INDENT}Use appropriate libraries to verify token authenticity.", t.muted))

    def expiry(self, result: ExpiryResult) -> None:
        t = self.theme
        self.banner("EXPIRY CHECK")

        if result.status is ExpiryStatus.NO_CLAIM:
            self._line(t.paint(f"{INDENT}No expiration claim (exp) found in token.", t.muted))
            return
        if result.status is ExpiryStatus.INVALID_FORMAT:
            self._line(t.paint(f"{INDENT}Invalid expiration claim format.", t.muted))
            return

        when = format_timestamp(result.expires_at)
        delta = format_duration(result.delta_seconds)
        if result.status is ExpiryStatus.EXPIRED:
            self._line(t.paint(f"{INDENT}✗ TOKEN EXPIRED", t.expired))
            self._line(t.paint(f"{INDENT}Expired: {when}", t.muted))
            self._line(t.paint(f"{INDENT}Expired: {delta} ago", t.muted))
        else:
            self._line(t.paint(f"{INDENT}✓ TOKEN VALID", t.valid))
            self._line(t.paint(f"{INDENT}Expires: {when}", t.muted))
            self._line(t.paint(f"{INDENT}Expires in: {delta}", t.muted))


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


_END = object()


def _walk_json(value: Any, theme: Theme, compact: bool) -> str:
    """Serialise *value* with an explicit stack, so nesting depth is unbounded.

    Compact output matches ``json.dumps(separators=(",", ":"))``; otherwise
    ``json.dumps(indent=2)``. Both with ``ensure_ascii=False``.
    """
    t = theme
    key_sep = ":" if compact else ": "
    parts: list[str] = []
    # Open containers: [closer, depth, entry iterator, is_object, first_entry]
    stack: list[list[Any]] = []

    def newline(depth: int) -> str:
        return "" if compact else "\n" + INDENT * depth

    def emit(item: Any, depth: int) -> None:
        kind = json_kind(item)
        if kind is JsonKind.OBJECT or kind is JsonKind.ARRAY:
            is_object = kind is JsonKind.OBJECT
            opener, closer = ("{", "}") if is_object else ("[", "]")
            if not item:
                parts.append(t.paint(opener + closer, t.punctuation))
                return
            parts.append(t.paint(opener, t.punctuation))
            entries = iter(item.items()) if is_object else iter(item)
            stack.append([closer, depth, entries, is_object, True])
            return

        style = {
            JsonKind.STRING: t.string,
            JsonKind.NUMBER: t.number,
            JsonKind.BOOLEAN: t.boolean,
            JsonKind.NULL: t.null,
        }[kind]
        parts.append(t.paint(_dump(item), style))

    emit(value, 0)
    while stack:
        frame = stack[-1]
        closer, depth, entries, is_object, first = frame
        entry = next(entries, _END)
        if entry is _END:
            stack.pop()
            parts.append(newline(depth) + t.paint(closer, t.punctuation))
            continue

        frame[4] = False
        parts.append(("" if first else ",") + newline(depth + 1))
        if is_object:
            key, entry = entry
            parts.append(t.paint(_dump(key), t.key) + key_sep)
        emit(entry, depth + 1)

    return "".join(parts)
