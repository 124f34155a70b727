"""
Centralized logging configuration.

Usage:
    from signage_compliance.utils.log import get_logger
    logger = get_logger(__name__)
    logger.info("Checking sign %s", reference)

Console output goes to stderr only; stdout carries RPC responses and
CLI JSON output.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "signage_compliance"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# handlers installed by setup_logging, replaced on every call
_handlers: list[logging.Handler] = []


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """
    Configure the package logger.

    Each CLI invocation (and the RPC server) calls this with its own level and
    log file; handlers from a previous call are closed and replaced, so the
    most recent configuration wins.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    _handlers.append(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setFormatter(fmt)
        _handlers.append(fh)

    for handler in _handlers:
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module. Automatically namespaced under 'signage_compliance'."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
