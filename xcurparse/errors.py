"""
Decode failures raised by the xcursor decoder.
"""

from __future__ import annotations

from typing import Optional

__all__ = ['XCursorError', 'NotACursorFile', 'Truncated', 'OutOfRange', 'IOFailure', 'Malformed']


class XCursorError(Exception):
    """Base class of every decode failure."""

    def __init__(self, message: str, *, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset


class NotACursorFile(XCursorError):
    """The magic number is not "Xcur"."""


class Truncated(XCursorError):
    """End of stream reached in the middle of a structure."""


class OutOfRange(XCursorError):
    """An offset, length or count points outside the file or the decoder limits."""


class IOFailure(XCursorError):
    """The underlying source failed to read or seek."""


class Malformed(XCursorError):
    """A table of contents entry disagrees with the chunk it points to."""
