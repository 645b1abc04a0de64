import io
import struct

import pytest

from conftest import IMAGE, build_xcursor, comment_chunk, image_chunk
from xcurparse import (
    CommentKind,
    DecoderLimits,
    Malformed,
    TocEntry,
    XCursorDecoder,
    open_xcursor,
)


def test_single_frame(red_green_blue):
    cursor = open_xcursor(red_green_blue)

    assert cursor.nominal_sizes == [32]
    (frame,) = cursor.frames(32)
    assert frame.size == (2, 2)
    assert frame.hot_spot == (0, 0)
    assert frame.delay_ms == 0
    assert len(frame.pixels) == 4
    assert frame.rgba(0, 0) == (255, 0, 0, 255)
    assert frame.pixel(1, 0) == 0
    assert frame.rgba(0, 1) == (0, 255, 0, 255)
    assert frame.rgba(1, 1) == (0, 0, 255, 255)


def test_header_fields(red_green_blue):
    cursor = open_xcursor(red_green_blue)
    assert cursor.version == 0x10000
    assert cursor.declared_size == 16
    assert cursor.table_of_contents == (TocEntry(IMAGE, 32, 28),)


def test_animation_order(animated):
    cursor = open_xcursor(animated)

    assert cursor.nominal_sizes == [48, 32]
    frames = cursor.frames(48)
    assert len(frames) == 2
    assert [f.pixel(0, 0) for f in frames] == [0xFF000001, 0xFF000002]
    assert [f.delay_ms for f in frames] == [100, 100]
    assert cursor.is_animated(48)
    assert not cursor.is_animated(32)
    assert cursor.frame_count == 3


def test_pixel_count_matches_dimensions():
    data = build_xcursor([
        (24, image_chunk(24, 3, 2, list(range(1, 7)), xhot=2, yhot=1, delay=30)),
        (64, image_chunk(64, 1, 4, [7, 8, 9, 10])),
    ])
    cursor = open_xcursor(data)
    for frames in cursor.size_classes.values():
        for frame in frames:
            assert len(frame.pixels) == frame.width * frame.height

    frame = cursor.frames(24)[0]
    # row major
    assert frame.pixel(2, 0) == 3
    assert frame.pixel(0, 1) == 4
    assert frame.hot_spot == (2, 1)


def test_pixels_are_read_only(red_green_blue):
    frame = open_xcursor(red_green_blue).frames(32)[0]
    with pytest.raises(ValueError):
        frame.pixels[0] = 1


def test_empty_toc():
    cursor = open_xcursor(build_xcursor([]))
    assert cursor.table_of_contents == ()
    assert cursor.comments == ()
    assert cursor.size_classes == {}
    assert cursor.best_size(32) is None


def test_comment():
    cursor = open_xcursor(build_xcursor([(1, comment_chunk(1, 'Test Name'))]))
    assert cursor.comments == (('Test Name', CommentKind.COPYRIGHT),)
    assert cursor.size_classes == {}


def test_comment_kinds():
    data = build_xcursor([
        (2, comment_chunk(2, 'GPL')),
        (3, comment_chunk(3, 'made by hand')),
        (9, comment_chunk(9, 'odd kind')),
    ])
    kinds = [c.kind for c in open_xcursor(data).comments]
    assert kinds == [CommentKind.LICENSE, CommentKind.OTHER, CommentKind.OTHER]


def test_comment_invalid_utf8_is_replaced():
    cursor = open_xcursor(build_xcursor([(3, comment_chunk(3, b'caf\xe9'))]))
    assert cursor.comments[0].text == 'caf\ufffd'


def test_unknown_toc_type_skipped():
    data = build_xcursor(
        [(1, comment_chunk(1, 'first')), (32, image_chunk(32, 1, 1, [0xFF123456]))],
        toc_types=[0x12345678, IMAGE],
    )
    cursor = open_xcursor(data)
    assert cursor.comments == ()
    assert cursor.frames(32)[0].pixel(0, 0) == 0xFF123456
    assert len(cursor.table_of_contents) == 2


def test_unknown_toc_type_beyond_eof_skipped():
    # the bogus entry points far past the end, it must never be followed
    data = build_xcursor(
        [(32, image_chunk(32, 1, 1, [0xFF123456]))],
        extra_toc=[(0x12345678, 0, 0xFFFFFF)],
    )
    cursor = open_xcursor(data)
    assert cursor.frames(32)[0].pixel(0, 0) == 0xFF123456


def test_unknown_chunk_type_skipped():
    junk = struct.pack('<IIII', 16, 0x00abcdef, 0, 1)
    data = build_xcursor(
        [(0, junk), (32, image_chunk(32, 1, 1, [1]))],
        toc_types=[IMAGE, IMAGE],
    )
    cursor = open_xcursor(data)
    assert cursor.frame_count == 1


def test_type_mismatch_uses_chunk_type():
    data = build_xcursor([(1, comment_chunk(1, 'hi'))], toc_types=[IMAGE])
    cursor = open_xcursor(data)
    assert cursor.comments == (('hi', CommentKind.COPYRIGHT),)


def test_type_mismatch_strict():
    data = build_xcursor([(1, comment_chunk(1, 'hi'))], toc_types=[IMAGE])
    decoder = XCursorDecoder(DecoderLimits(strict_types=True))
    with pytest.raises(Malformed):
        decoder.decode(data)


def test_chunks_out_of_order():
    # chunks may live anywhere, the toc decides the order
    first = image_chunk(16, 1, 1, [1])
    second = image_chunk(16, 1, 1, [2])
    header = b'Xcur' + struct.pack('<III', 16, 1, 2)
    body_start = 16 + 24
    toc = (struct.pack('<III', IMAGE, 16, body_start + len(second))
           + struct.pack('<III', IMAGE, 16, body_start))
    cursor = open_xcursor(header + toc + second + first)
    assert [f.pixel(0, 0) for f in cursor.frames(16)] == [1, 2]


def test_shared_chunk_decoded_twice():
    chunk = image_chunk(32, 1, 1, [5])
    header = b'Xcur' + struct.pack('<III', 16, 1, 2)
    toc = struct.pack('<III', IMAGE, 32, 40) * 2
    cursor = open_xcursor(header + toc + chunk)
    assert len(cursor.frames(32)) == 2


def test_name_from_path(tmp_path, red_green_blue):
    path = tmp_path / 'left_ptr.xcur'
    path.write_bytes(red_green_blue)
    assert open_xcursor(path).name == 'left_ptr'
    assert open_xcursor(str(path), name='arrow').name == 'arrow'


def test_name_from_file_object(tmp_path, red_green_blue):
    path = tmp_path / 'watch'
    path.write_bytes(red_green_blue)
    with open(path, 'rb') as f:
        cursor = open_xcursor(f)
        assert not f.closed
    assert cursor.name == 'watch'
    assert open_xcursor(io.BytesIO(red_green_blue)).name == ''


def test_best_size(animated):
    cursor = open_xcursor(animated)
    assert cursor.best_size(48) == 48
    assert cursor.best_size(36) == 32
    assert cursor.best_size(40) == 48  # tie, first seen wins
    assert cursor.best_size(100) == 48


def test_to_image(red_green_blue):
    image = open_xcursor(red_green_blue).frames(32)[0].to_image()
    assert image.mode == 'RGBA'
    assert image.size == (2, 2)
    assert image.getpixel((0, 0)) == (255, 0, 0, 255)
    assert image.getpixel((1, 0)) == (0, 0, 0, 0)
    assert image.getpixel((0, 1)) == (0, 255, 0, 255)
    assert image.getpixel((1, 1)) == (0, 0, 255, 255)


def test_to_image_not_square():
    data = build_xcursor([(8, image_chunk(8, 3, 1, [0xFFFF0000, 0xFF00FF00, 0xFF0000FF]))])
    image = open_xcursor(data).frames(8)[0].to_image()
    assert image.size == (3, 1)
    assert image.getpixel((2, 0)) == (0, 0, 255, 255)


def test_pixel_out_of_bounds(red_green_blue):
    frame = open_xcursor(red_green_blue).frames(32)[0]
    with pytest.raises(IndexError):
        frame.pixel(2, 0)


def test_decoder_shared_between_threads(animated, red_green_blue):
    from concurrent.futures import ThreadPoolExecutor

    decoder = XCursorDecoder()
    inputs = [animated, red_green_blue] * 8
    with ThreadPoolExecutor(max_workers=4) as pool:
        cursors = list(pool.map(decoder.decode, inputs))
    assert [c.nominal_sizes for c in cursors] == [[48, 32], [32]] * 8
