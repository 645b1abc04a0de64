import struct

import pytest

XCUR = b'Xcur'
COMMENT = 0xfffe0001
IMAGE = 0xfffd0002


def image_chunk(nominal, width, height, pixels, xhot=0, yhot=0, delay=0):
    assert len(pixels) == width * height
    return (struct.pack('<IIIIIIIII', 36, IMAGE, nominal, 1,
                        width, height, xhot, yhot, delay)
            + struct.pack(f'<{len(pixels)}I', *pixels))


def comment_chunk(kind, text):
    raw = text.encode('utf-8') if isinstance(text, str) else text
    return struct.pack('<IIIII', 20, COMMENT, kind, 1, len(raw)) + raw


def build_xcursor(chunks, toc_types=None, magic=XCUR, extra_toc=()):
    """lay out a cursor file: header, toc, then the chunks in order

    chunks is a list of (subtype, chunk bytes); the toc type is read back
    from the chunk unless toc_types overrides it. extra_toc entries are
    appended to the toc verbatim as (type, subtype, position).
    """
    n_toc = len(chunks) + len(extra_toc)
    position = 16 + 12 * n_toc
    toc = b''
    body = b''
    for i, (subtype, chunk) in enumerate(chunks):
        chunk_type = struct.unpack_from('<I', chunk, 4)[0]
        if toc_types is not None:
            chunk_type = toc_types[i]
        toc += struct.pack('<III', chunk_type, subtype, position)
        body += chunk
        position += len(chunk)
    for entry in extra_toc:
        toc += struct.pack('<III', *entry)
    header = magic + struct.pack('<III', 16, 0x10000, n_toc)
    return header + toc + body


@pytest.fixture
def red_green_blue():
    """the 2x2 frame of a single size 32 cursor"""
    pixels = [0xFFFF0000, 0, 0xFF00FF00, 0xFF0000FF]
    return build_xcursor([(32, image_chunk(32, 2, 2, pixels))])


@pytest.fixture
def animated():
    """two size 48 frames followed by one size 32 frame"""
    return build_xcursor([
        (48, image_chunk(48, 1, 1, [0xFF000001], delay=100)),
        (32, image_chunk(32, 1, 1, [0xFF000003], delay=50)),
        (48, image_chunk(48, 1, 1, [0xFF000002], delay=100)),
    ])
