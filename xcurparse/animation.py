from typing import Optional, Sequence

from .cursor import ImageFrame

__all__ = ('FrameStepper',)


class FrameStepper:
    """Steps through the frames of one size class.

    The first tick starts the clock. Each later tick moves to the next frame
    once the current frame's delay has passed, wrapping around after the
    last one. A single frame never advances.
    """

    def __init__(self, frames: Sequence[ImageFrame]):
        if not frames:
            raise ValueError('cannot animate an empty size class')
        self.frames = tuple(frames)
        self.index = 0
        self.last_update: Optional[int] = None

    @property
    def current(self) -> ImageFrame:
        return self.frames[self.index]

    @property
    def total_duration_ms(self) -> int:
        return sum(frame.delay_ms for frame in self.frames)

    def reset(self):
        self.index = 0
        self.last_update = None

    def tick(self, now_ms: int) -> ImageFrame:
        if len(self.frames) > 1:
            if self.last_update is None:
                self.last_update = now_ms
            elif now_ms - self.last_update >= self.current.delay_ms:
                self.last_update = now_ms
                self.index = (self.index + 1) % len(self.frames)
        return self.current
