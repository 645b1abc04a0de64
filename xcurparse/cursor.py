from dataclasses import dataclass, field
from enum import IntEnum
from typing import NamedTuple

import numpy as np
from PIL import Image

__all__ = ('CommentKind', 'Comment', 'TocEntry', 'ImageFrame', 'CursorFile')


class CommentKind(IntEnum):
    COPYRIGHT = 1
    LICENSE = 2
    OTHER = 3

    @classmethod
    def from_subtype(cls, subtype: int) -> 'CommentKind':
        """map a comment chunk subtype, unknown values become OTHER"""
        try:
            return cls(subtype)
        except ValueError:
            return cls.OTHER


class Comment(NamedTuple):
    text: str
    kind: CommentKind


@dataclass(frozen=True)
class TocEntry:
    type: int
    subtype: int  # nominal size for images, comment kind for comments
    position: int  # absolute offset of the chunk


@dataclass(frozen=True)
class ImageFrame:
    width: int
    height: int
    hotspot_x: int
    hotspot_y: int
    delay_ms: int
    # flat, row-major 0xAARRGGBB values, width * height of them
    pixels: np.ndarray = field(repr=False, compare=False)

    @property
    def size(self) -> tuple:
        return self.width, self.height

    @property
    def hot_spot(self) -> tuple:
        return self.hotspot_x, self.hotspot_y

    def pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f'pixel ({x}, {y}) outside {self.width}x{self.height} frame')
        return int(self.pixels[y * self.width + x])

    def rgba(self, x: int, y: int) -> tuple:
        value = self.pixel(x, y)
        return ((value >> 16) & 0xff,
                (value >> 8) & 0xff,
                value & 0xff,
                (value >> 24) & 0xff)

    def to_image(self) -> Image.Image:
        """convert the frame into a PIL RGBA image"""
        # little endian 0xAARRGGBB is B, G, R, A in memory
        pixel_array = self.pixels.astype('<u4').view(np.ubyte)
        pixel_array = pixel_array.reshape((self.height, self.width, 4))
        pixel_array = np.stack(
            (pixel_array[:, :, 2],
             pixel_array[:, :, 1],
             pixel_array[:, :, 0],
             pixel_array[:, :, 3]),
            axis=2)
        return Image.fromarray(np.ascontiguousarray(pixel_array))


@dataclass(frozen=True)
class CursorFile:
    name: str
    version: int
    declared_size: int
    table_of_contents: tuple = ()
    comments: tuple = ()
    size_classes: dict = field(default_factory=dict)

    @property
    def nominal_sizes(self) -> list:
        return list(self.size_classes)

    @property
    def frame_count(self) -> int:
        return sum(len(frames) for frames in self.size_classes.values())

    def frames(self, size: int) -> tuple:
        return self.size_classes.get(size, ())

    def is_animated(self, size: int) -> bool:
        return len(self.frames(size)) > 1

    def best_size(self, target: int):
        """closest nominal size to target, the first one seen wins a tie"""
        best = None
        for size in self.size_classes:
            if best is None or abs(size - target) < abs(best - target):
                best = size
        return best
