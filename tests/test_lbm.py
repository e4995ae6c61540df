import io
import random
import struct

import pytest

from livebg.image import Color, ColorRange, CycleMode
from livebg.lbm import LbmError, file_is_lbm, load_image_lbm


def _chunk(cid, data):
    return cid + struct.pack(">I", len(data)) + data


def _bmhd(w, h, nplanes, compression=0, masking=0):
    return _chunk(
        b"BMHD",
        struct.pack(">HHhhBBBBHBBhh", w, h, 0, 0, nplanes, masking, compression, 0, 0, 1, 1, w, h),
    )


def _crng(rate, flags, low, high):
    return _chunk(b"CRNG", struct.pack(">HHHBB", 0, rate, flags, low, high))


def _form(kind, *chunks):
    body = kind + b"".join(chunks)
    return b"FORM" + struct.pack(">I", len(body)) + body


def _load(data):
    return load_image_lbm(io.BytesIO(data))


def _plane_rows(pixels, width, height, nplanes):
    rows = []
    for y in range(height):
        line = pixels[y * width:(y + 1) * width]
        planes = []
        for plane in range(nplanes):
            bits = 0
            for px in line:
                bits = (bits << 1) | ((px >> plane) & 1)
            planes.append(bits.to_bytes(width // 8, "big"))
        rows.append(planes)
    return rows


def _random_pixels(n, nplanes, seed=1):
    rng = random.Random(seed)
    return bytes(rng.randrange(1 << nplanes) for _ in range(n))


def test_pbm_uncompressed():
    pixels = bytes(range(12))
    img = _load(_form(b"PBM ", _bmhd(4, 3, 8), _chunk(b"BODY", pixels)))
    assert (img.width, img.height, img.bpp) == (4, 3, 8)
    assert bytes(img.pixels) == pixels


def test_colormap_sets_leading_entries():
    cmap = _chunk(b"CMAP", bytes([1, 2, 3, 4, 5, 6]))
    img = _load(_form(b"PBM ", _bmhd(2, 1, 8), cmap, _chunk(b"BODY", b"\0\1")))
    assert img.palette[0] == Color(1, 2, 3)
    assert img.palette[1] == Color(4, 5, 6)
    assert img.palette[2] == Color(0, 0, 0)
    assert len(img.palette) == 256


def test_color_ranges_filtered_and_prepended():
    img = _load(
        _form(
            b"PBM ",
            _bmhd(2, 1, 8),
            _crng(1000, 1, 10, 20),
            _crng(0, 1, 30, 40),
            _crng(500, 1, 50, 50),
            _crng(2000, 3, 60, 70),
            _chunk(b"BODY", b"\0\0"),
        )
    )
    assert img.ranges == [
        ColorRange(low=60, high=70, cmode=CycleMode.REVERSE, rate=2000),
        ColorRange(low=10, high=20, cmode=CycleMode.NORMAL, rate=1000),
    ]


def test_pbm_compressed_runs():
    row = bytes([0x80, 1, 10, 11, 0xFD, 7])
    img = _load(_form(b"PBM ", _bmhd(6, 2, 8, compression=1), _chunk(b"BODY", row + row)))
    expected = bytes([10, 11, 7, 7, 7, 7])
    assert bytes(img.pixels) == expected * 2


def test_ilbm_uncompressed_round_trip():
    w, h, planes = 16, 4, 3
    pixels = _random_pixels(w * h, planes)
    body = b"".join(b"".join(r) for r in _plane_rows(pixels, w, h, planes))
    img = _load(_form(b"ILBM", _bmhd(w, h, planes), _chunk(b"BODY", body)))
    assert img.bpp == planes
    assert bytes(img.pixels) == pixels


def test_ilbm_compressed_with_mask_plane():
    w, h, planes = 16, 3, 5
    pixels = _random_pixels(w * h, planes, seed=7)
    body = b""
    for row in _plane_rows(pixels, w, h, planes):
        body += b"".join(bytes([len(p) - 1]) + p for p in row)
        body += b"\xff" * (w // 8)
    img = _load(
        _form(b"ILBM", _bmhd(w, h, planes, compression=1, masking=1), _chunk(b"BODY", body))
    )
    assert bytes(img.pixels) == pixels


def test_unknown_odd_chunk_is_skipped_with_padding():
    pixels = bytes([9, 8, 7, 6])
    data = _form(
        b"PBM ",
        _bmhd(2, 2, 8),
        _chunk(b"ANNO", b"abc") + b"\0",
        _chunk(b"BODY", pixels),
    )
    assert bytes(_load(data).pixels) == pixels


def test_too_many_planes():
    with pytest.raises(LbmError):
        _load(_form(b"PBM ", _bmhd(2, 2, 9), _chunk(b"BODY", b"\0" * 4)))


def test_body_before_header():
    with pytest.raises(LbmError):
        _load(_form(b"PBM ", _chunk(b"BODY", b"\0" * 4), _bmhd(2, 2, 8)))


def test_missing_body():
    with pytest.raises(LbmError):
        _load(_form(b"PBM ", _bmhd(2, 2, 8)))


def test_truncated_body():
    with pytest.raises(LbmError):
        _load(_form(b"PBM ", _bmhd(4, 4, 8)) + b"BODY" + struct.pack(">I", 16) + b"\0\0")


def test_bad_bitmap_header_size():
    with pytest.raises(LbmError):
        _load(_form(b"PBM ", _chunk(b"BMHD", b"\0" * 10), _chunk(b"BODY", b"")))


def test_no_image_form():
    with pytest.raises(LbmError):
        _load(b"not an iff file at all")


def test_file_is_lbm_true_and_rewinds():
    fp = io.BytesIO(_form(b"ILBM", _bmhd(8, 1, 1), _chunk(b"BODY", b"\0")))
    assert file_is_lbm(fp) is True
    assert fp.tell() == 0


def test_file_is_lbm_false_and_rewinds():
    fp = io.BytesIO(b"{ width: 10, height: 10 }")
    assert file_is_lbm(fp) is False
    assert fp.tell() == 0


def test_other_form_is_skipped():
    pixels = bytes([4, 5])
    data = _form(b"8SVX", _chunk(b"VHDR", b"\0" * 4)) + _form(
        b"PBM ", _bmhd(2, 1, 8), _chunk(b"BODY", pixels)
    )
    assert file_is_lbm(io.BytesIO(data)) is True
    assert bytes(_load(data).pixels) == pixels