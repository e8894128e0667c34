"""Logging configuration for hookgen.

Diagnostics go to stderr so they never mix with a hook printed on stdout,
which users typically pipe straight into ``eval`` or a startup file.

Usage:
    >>> setup_logging(verbose=True)
    >>> logger = logging.getLogger(__name__)
    >>> logger.debug("Generating hook")
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    quiet: bool = False,
) -> logging.Logger:
    """Configure logging for the hookgen CLI.

    Args:
        verbose: If True, set DEBUG level; otherwise WARNING level
        log_file: Optional path to a log file that always receives DEBUG records
        quiet: If True, suppress everything except errors

    Returns:
        The configured package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        handlers.append(file_handler)

    package_logger = logging.getLogger("hookgen")
    package_logger.setLevel(logging.DEBUG if log_file else level)

    # Re-running setup (e.g. repeated main() calls in tests) must not stack handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        package_logger.addHandler(handler)

    package_logger.propagate = False
    return package_logger
