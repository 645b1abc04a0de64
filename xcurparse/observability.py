"""
Decode timing, reported through loguru.
"""
from __future__ import annotations

import time
from dataclasses import dataclass

from loguru import logger


@dataclass
class DecodeTimer:
    """Times one decode call and logs how it ended.

    Successful decodes are logged at DEBUG with the frame count set by the
    caller, failures at DEBUG with the exception class. Exceptions are
    never suppressed.
    """

    name: str
    start: float = 0.0
    duration_ms: float = 0.0
    frames: int = 0

    def __enter__(self) -> "DecodeTimer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start) * 1000.0
        if exc_type is None:
            logger.debug("{}: {} frame(s) decoded in {:.2f} ms", self.name, self.frames, self.duration_ms)
        else:
            logger.debug("{}: {} after {:.2f} ms", self.name, exc_type.__name__, self.duration_ms)
