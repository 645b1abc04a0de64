"""
Implementation of the decoder of the xcursor file format.
Reference: https://man.archlinux.org/man/Xcursor.3
"""


import io
import os
import struct
from pathlib import Path
from typing import Optional, Union

import numpy as np
from loguru import logger

from .config import DecoderLimits
from .cursor import *
from .errors import *
from .observability import DecodeTimer


__all__ = ['XCURSOR_MAGIC', 'XCURSOR_COMMENT_TYPE', 'XCURSOR_IMAGE_TYPE',
           'XCursorDecoder', 'is_xcursor', 'open_xcursor']

XCURSOR_MAGIC = 0x58637572  # "Xcur"
XCURSOR_COMMENT_TYPE = 0xfffe0001
XCURSOR_IMAGE_TYPE = 0xfffd0002

FILE_HEADER = struct.Struct('<IIII')  # magic, size, version, ntoc
TOC_ENTRY = struct.Struct('<III')  # type, subtype, position
CHUNK_HEADER = struct.Struct('<IIII')  # length, type, subtype, version
IMAGE_HEADER = struct.Struct('<IIIII')  # width, height, xhot, yhot, delay
U32 = struct.Struct('<I')

CHUNK_NAMES = {
    XCURSOR_COMMENT_TYPE: 'comment',
    XCURSOR_IMAGE_TYPE: 'image',
}

Source = Union[str, os.PathLike, bytes, bytearray, io.IOBase]


def is_xcursor(source: Source) -> bool:
    """check the magic string, never raises"""
    try:
        if isinstance(source, (bytes, bytearray, memoryview)):
            magic = bytes(source[:4])
        elif isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as f:
                magic = f.read(4)
        else:
            # the magic sits at offset 0 whatever the stream position is, as for decode
            start = source.tell()
            try:
                source.seek(0)
                magic = source.read(4)
            finally:
                source.seek(start)

        if not isinstance(magic, (bytes, bytearray)) or len(magic) < 4:
            return False
        # the magic is stored little endian, so the raw bytes read back to front give "Xcur"
        return struct.unpack('>I', magic)[0] == XCURSOR_MAGIC
    except Exception as e:
        logger.debug('sniffing {!r} failed: {}', source, e)
        return False


def _stem(file) -> str:
    name = getattr(file, 'name', None)
    if isinstance(name, (str, os.PathLike)):
        return Path(name).stem
    return ''


class _Reader:
    """bounds checked little endian reads over a seekable binary stream"""

    def __init__(self, f):
        self._f = f
        try:
            self.size = f.seek(0, io.SEEK_END)
            f.seek(0)
        except (OSError, ValueError) as e:
            raise IOFailure(f'source is not seekable: {e}') from e

    def tell(self) -> int:
        try:
            return self._f.tell()
        except OSError as e:
            raise IOFailure(f'tell failed: {e}') from e

    def seek(self, position: int, what: str):
        if position > self.size:
            raise OutOfRange(
                f'{what} at offset {position} lies beyond the end of the file ({self.size} bytes)',
                offset=position)
        try:
            self._f.seek(position)
        except OSError as e:
            raise IOFailure(f'seek to {what} at offset {position} failed: {e}', offset=position) from e

    def require(self, n: int, what: str):
        offset = self.tell()
        if offset + n > self.size:
            raise OutOfRange(
                f'{what} at offset {offset} needs {n} bytes, only {self.size - offset} left',
                offset=offset)

    def read(self, n: int, what: str) -> bytes:
        offset = self.tell()
        try:
            data = self._f.read(n)
        except OSError as e:
            raise IOFailure(f'reading {what} at offset {offset} failed: {e}', offset=offset) from e
        if len(data) < n:
            raise Truncated(
                f'{what} at offset {offset}: expected {n} bytes, got {len(data)}',
                offset=offset)
        return data

    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        return fmt.unpack(self.read(fmt.size, what))


class XCursorDecoder:
    """Decodes xcursor files into CursorFile objects.

    The decoder keeps no state between calls apart from its limits, one
    instance can be shared between threads.
    """

    def __init__(self, limits: Optional[DecoderLimits] = None):
        self.limits = limits or DecoderLimits()

    def decode(self, source: Source, name: Optional[str] = None, check_magic=False) -> CursorFile:
        """Decode a whole xcursor file.

        Paths are opened and closed here, file objects are left open for
        the caller. Any failure raises a XCursorError subclass and no
        partial result is returned.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self._decode(io.BytesIO(bytes(source)), name or '', check_magic)

        if isinstance(source, (str, os.PathLike)):
            try:
                f = open(source, 'rb')
            except OSError as e:
                raise IOFailure(f'cannot open {source}: {e}') from e
            with f:
                return self._decode(f, Path(source).stem if name is None else name, check_magic)

        return self._decode(source, _stem(source) if name is None else name, check_magic)

    def _decode(self, f, name: str, check_magic: bool) -> CursorFile:
        with DecodeTimer(name or '<stream>') as timer:
            cursor = self._parse(f, name, check_magic)
            timer.frames = cursor.frame_count
        return cursor

    def _parse(self, f, name: str, check_magic: bool) -> CursorFile:
        reader = _Reader(f)

        # load header
        magic, declared_size, version, n_entry = reader.unpack(FILE_HEADER, 'file header')
        logger.debug('{}: header size {}, version {:#x}, {} toc entries',
                     name or '<stream>', declared_size, version, n_entry)
        if check_magic and U32.pack(magic) != b'Xcur':
            raise NotACursorFile(f'bad magic {U32.pack(magic)!r}, expected b\'Xcur\'', offset=0)
        if n_entry > self.limits.max_toc_entries:
            raise OutOfRange(
                f'{n_entry} table of contents entries exceed the limit of {self.limits.max_toc_entries}',
                offset=12)

        # load table of content, it follows the 16 byte header directly
        toc = tuple(TocEntry(*reader.unpack(TOC_ENTRY, f'table of contents entry {i}'))
                    for i in range(n_entry))

        # load the chunks
        comments = []
        size_classes = {}
        for i, entry in enumerate(toc):
            if entry.type not in CHUNK_NAMES:
                logger.warning('toc entry {}: unknown chunk type {:#x}, skipping', i, entry.type)
                continue

            reader.seek(entry.position, f'chunk {i}')
            length, chunk_type, subtype, chunk_version = reader.unpack(CHUNK_HEADER, f'chunk {i} header')
            logger.debug('\t{}: {} chunk at {}, subtype {}, version {}',
                         i, CHUNK_NAMES.get(chunk_type, hex(chunk_type)), entry.position, subtype, chunk_version)

            # check chunk type again
            if chunk_type != entry.type:
                if self.limits.strict_types:
                    raise Malformed(
                        f'chunk {i}: toc says {entry.type:#x}, chunk says {chunk_type:#x}',
                        offset=entry.position)
                logger.warning('chunk {}: toc type {:#x} and actual type {:#x} do not match, using actual type',
                               i, entry.type, chunk_type)

            if chunk_type == XCURSOR_COMMENT_TYPE:
                comments.append(self._read_comment(reader, subtype, i))
            elif chunk_type == XCURSOR_IMAGE_TYPE:
                frame = self._read_image(reader, i)
                size_classes.setdefault(subtype, []).append(frame)
            else:
                logger.warning('chunk {}: unknown chunk type {:#x}, skipping', i, chunk_type)

        return CursorFile(
            name=name,
            version=version,
            declared_size=declared_size,
            table_of_contents=toc,
            comments=tuple(comments),
            size_classes={size: tuple(frames) for size, frames in size_classes.items()},
        )

    def _read_comment(self, reader: _Reader, subtype: int, index: int) -> Comment:
        (text_length,) = reader.unpack(U32, f'chunk {index} comment length')
        reader.require(text_length, f'chunk {index} comment text')
        raw = reader.read(text_length, f'chunk {index} comment text')
        return Comment(raw.decode('utf-8', errors='replace'), CommentKind.from_subtype(subtype))

    def _read_image(self, reader: _Reader, index: int) -> ImageFrame:
        w, h, xhot, yhot, delay = reader.unpack(IMAGE_HEADER, f'chunk {index} image header')
        limit = self.limits.max_dimension
        if w > limit or h > limit:
            raise OutOfRange(f'chunk {index}: image {w}x{h} exceeds the {limit} pixel limit',
                             offset=reader.tell())

        # read pixels
        n_bytes = w * h * 4
        reader.require(n_bytes, f'chunk {index} pixels')
        pixel_data = reader.read(n_bytes, f'chunk {index} pixels')
        pixels = np.frombuffer(pixel_data, dtype='<u4').astype(np.uint32)
        pixels.flags.writeable = False
        return ImageFrame(w, h, xhot, yhot, delay, pixels)


def open_xcursor(file: Source, limits: Optional[DecoderLimits] = None,
                 name: Optional[str] = None, check_magic=False) -> CursorFile:
    """load a xcursor file"""
    return XCursorDecoder(limits).decode(file, name=name, check_magic=check_magic)
