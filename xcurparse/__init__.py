"""
xcurparse
=========

Decoder for X-Windows cursor files (Xcursor format): table of contents,
comment and image chunks, frames grouped by nominal size.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

from loguru import logger as _logger

from .animation import FrameStepper
from .config import DecoderLimits
from .cursor import Comment, CommentKind, CursorFile, ImageFrame, TocEntry
from .errors import IOFailure, Malformed, NotACursorFile, OutOfRange, Truncated, XCursorError
from .xcursor import XCursorDecoder, is_xcursor, open_xcursor

__all__ = [
    "__version__",
    "Comment",
    "CommentKind",
    "CursorFile",
    "DecoderLimits",
    "FrameStepper",
    "IOFailure",
    "ImageFrame",
    "Malformed",
    "NotACursorFile",
    "OutOfRange",
    "TocEntry",
    "Truncated",
    "XCursorDecoder",
    "XCursorError",
    "is_xcursor",
    "open_xcursor",
]

# silent until xcurparse.logging.configure_logging() is called
_logger.disable("xcurparse")

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("xcurparse")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
