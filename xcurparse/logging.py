# xcurparse/logging.py
"""
Logging setup using Loguru.

The package logger is disabled on import, as loguru recommends for
libraries; applications opt in with :func:`configure_logging`.
"""
from __future__ import annotations

import sys
from typing import Any

from loguru import logger

PACKAGE = "xcurparse"


def configure_logging(*, debug: bool = False, sink: Any = None) -> None:
    """Enable decoder logging on a single sink.

    Args:
        debug: Include per-chunk traces and decode timings.
        sink: Where records go, stderr when not given.
    """
    logger.remove()
    logger.enable(PACKAGE)
    level = "DEBUG" if debug else "INFO"
    fmt = (
        "<green>{time:HH:mm:ss.SSS}</green> "
        "| <level>{level: <8}</level> "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> "
        "- <level>{message}</level>"
    )
    logger.add(
        sys.stderr if sink is None else sink,
        level=level,
        format=fmt,
        # other libraries only get through with warnings
        filter={"": "WARNING", PACKAGE: level},
        backtrace=debug,
        diagnose=debug,
    )
