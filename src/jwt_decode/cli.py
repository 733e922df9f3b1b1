"""
CLI entry point for the JWT Decode tool.

    jwt-decode [options] <token>
    jwt-decode version

Pass ``-`` as the token to read it from stdin (for piping).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from . import __version__
from .config import ConfigError, Settings, load_config, parse_settings, resolve_config_path
from .decoder import DecodeError, decode_token
from .expiry import check_expiry
from .logging_setup import setup_logging
from .render import Renderer, Theme, print_error, resolve_color

__all__ = ["main"]

logger = logging.getLogger(__name__)

EXAMPLE_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
    ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = _ArgumentParser(
        prog="jwt-decode",
        description="Decode and inspect a JWT token without signature verification.",
        epilog="Examples:\n"
               f"  %(prog)s {EXAMPLE_TOKEN[:40]}...\n"
               "  %(prog)s --check-expiry <token>\n"
               "  echo '<token>' | %(prog)s -\n"
               "  %(prog)s version\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("token", help="JWT token string, or '-' to read it from stdin")
    parser.add_argument("--raw", "-r", action="store_true", default=False,
                        help="Show compact JSON without formatting or color")
    parser.add_argument("--no-color", "-n", action="store_true", default=False,
                        help="Disable colored output")
    parser.add_argument("--check-expiry", "-e", action="store_true", default=False,
                        help="Check whether the token is expired")
    parser.add_argument("--config", "-c", default=None,
                        help="Path to YAML config file (default: config/config.yaml if present)")
    parser.add_argument("--verbose", "-v", action="store_true", default=False,
                        help="Enable verbose (debug) logging on stderr")
    parser.add_argument("--log-file", default=None, help="Also write debug logs to this file")
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fail(message: str, color_mode: str) -> NoReturn:
    theme = Theme.for_color(resolve_color(color_mode, sys.stderr))
    print_error(message, theme)
    sys.exit(1)


def _load_settings(config_path: str | None) -> Settings:
    path = resolve_config_path(config_path)
    if path is None:
        logger.debug("No config file, using defaults")
        return Settings()
    return parse_settings(load_config(path))


def _read_token(arg: str, color_mode: str) -> str:
    if arg != "-":
        return arg
    try:
        token = sys.stdin.read().strip()
    except UnicodeDecodeError as exc:
        _fail(f"Could not read token from stdin: {exc}", color_mode)
    if not token:
        _fail("No token received on stdin.", color_mode)
    return token


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else list(argv)

    # --- Subcommand: version -----------------------------------------------
    if argv and argv[0] == "version":
        print(f"jwt-decode version {__version__}")
        sys.exit(0)

    args = _parse_args(argv)
    color_mode = "never" if args.no_color else "auto"

    try:
        setup_logging(verbose=args.verbose, log_file=args.log_file)
    except OSError as exc:
        _fail(f"Cannot open log file: {exc}", color_mode)

    # --- Settings: config file, then CLI overrides --------------------------
    try:
        settings = _load_settings(args.config)
    except ConfigError as exc:
        _fail(str(exc), color_mode)

    if args.no_color:
        settings.color = "never"
    if args.raw:
        settings.raw = True
    if args.check_expiry:
        settings.check_expiry = True
    logger.debug("Settings: %s", settings)

    # --- Decode -------------------------------------------------------------
    token = _read_token(args.token, settings.color)
    try:
        result = decode_token(token)
    except DecodeError as exc:
        logger.debug("Decode failed", exc_info=True)
        _fail(str(exc), settings.color)

    # --- Render -------------------------------------------------------------
    theme = Theme.for_color(resolve_color(settings.color, sys.stdout))
    renderer = Renderer(theme, tz=settings.tzinfo)

    renderer.section("HEADER", result.header, raw=settings.raw)
    renderer.blank()
    renderer.section("PAYLOAD", result.payload, raw=settings.raw, annotate=True)
    renderer.blank()
    renderer.signature(result.signature)

    if settings.check_expiry:
        renderer.blank()
        renderer.expiry(check_expiry(result.payload, tz=settings.tzinfo))
