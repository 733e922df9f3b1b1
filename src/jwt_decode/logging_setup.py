"""
Logging configuration for the jwt-decode CLI.

Console handler on stderr (WARNING by default, DEBUG when verbose) and an
optional DEBUG file handler. Nothing is ever logged to stdout.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure the root logger for one CLI run."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers (e.g. from basicConfig)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        "%(levelname)-8s  %(message)s" if not verbose
        else "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    ))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)
