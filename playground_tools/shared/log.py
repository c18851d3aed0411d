"""Logging setup shared by the CLI entry points."""

from __future__ import annotations

import logging
import sys
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Send ``playground_tools`` log records to stderr at ``level``."""
    root = logging.getLogger("playground_tools")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Idempotent across repeated CLI invocations in one process (tests)
    for handler in list(root.handlers):
        if getattr(handler, "_playground", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    handler._playground = True  # type: ignore[attr-defined]
    root.addHandler(handler)
