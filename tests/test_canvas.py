import struct

import pytest

from livebg.canvas import CanvasFormatError, load_image, parse_canvas
from livebg.image import Color

SAMPLE = (
    "CanvasCycle.processImage({filename:'TEST.LBM',width:2,height:2,\n"
    "colors:[[0,0,0],[255,0,0],[0,255,0],[0,0,255]],\n"
    "cycles:[{reverse:0,rate:280,low:1,high:3},"
    "{reverse:2,rate:0,low:0,high:2},"
    "{reverse:2,rate:500,low:4,high:8}],\n"
    "pixels:[0,1,2,3]});"
)


def test_dimensions_and_pixels():
    img = parse_canvas(SAMPLE)
    assert (img.width, img.height, img.bpp) == (2, 2, 8)
    assert bytes(img.pixels) == bytes([0, 1, 2, 3])


def test_palette_entries():
    img = parse_canvas(SAMPLE)
    assert img.palette[1] == Color(255, 0, 0)
    assert img.palette[3] == Color(0, 0, 255)
    assert img.palette[4] == Color(0, 0, 0)
    assert len(img.palette) == 256


def test_cycles_filtered_and_reversed():
    img = parse_canvas(SAMPLE)
    assert [(r.low, r.high, r.cmode, r.rate) for r in img.ranges] == [
        (4, 8, 2, 500),
        (1, 3, 0, 280),
    ]


def test_equal_bounds_range_dropped():
    img = parse_canvas("{width:1,height:1,cycles:[{rate:10,low:5,high:5}],pixels:[0]}")
    assert img.ranges == []


def test_extra_palette_entries_ignored():
    entries = ",".join(f"[{i % 256},1,2]" for i in range(300))
    img = parse_canvas("{width:1,height:1,colors:[" + entries + "],pixels:[0]}")
    assert len(img.palette) == 256
    assert img.palette[255] == Color(255, 1, 2)


def test_extra_pixels_dropped():
    img = parse_canvas("{width:1,height:1,pixels:[5,6,7]}")
    assert bytes(img.pixels) == bytes([5])


def test_whitespace_inside_number_is_skipped():
    img = parse_canvas("{width: 1 2 ,height:1,pixels:[0]}")
    assert img.width == 12


def test_no_block():
    with pytest.raises(CanvasFormatError):
        parse_canvas("no block here")


def test_pixels_before_dimensions():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{pixels:[1,2]}")


def test_missing_pixels():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{width:2,height:2}")


def test_unknown_attribute():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{depth:3,pixels:[0]}")


def test_unexpected_character():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{width:-5,height:1,pixels:[0]}")


def test_unclosed_palette():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{width:1,height:1,colors:[[1,2,3]}")


def test_unclosed_cycles():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{width:1,height:1,cycles:[{rate:1,low:0,high:2}")


def test_bad_range_attribute():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{width:1,height:1,cycles:[{speed:1}],pixels:[0]}")


def test_filename_must_be_string():
    with pytest.raises(CanvasFormatError):
        parse_canvas("{filename:12,width:1,height:1,pixels:[0]}")


def test_load_script_file(tmp_path):
    path = tmp_path / "image.js"
    path.write_text(SAMPLE)
    img = load_image(path)
    assert bytes(img.pixels) == bytes([0, 1, 2, 3])
    assert img.palette[2] == Color(0, 255, 0)


def _pbm_bytes():
    bmhd = struct.pack(">HHhhBBBBHBBhh", 2, 1, 0, 0, 8, 0, 0, 0, 0, 1, 1, 2, 1)
    cmap = bytes([10, 20, 30, 40, 50, 60])
    body = bytes([1, 0])
    chunks = (
        b"BMHD" + struct.pack(">I", len(bmhd)) + bmhd
        + b"CMAP" + struct.pack(">I", len(cmap)) + cmap
        + b"BODY" + struct.pack(">I", len(body)) + body
    )
    form = b"PBM " + chunks
    return b"FORM" + struct.pack(">I", len(form)) + form


def test_load_lbm_file(tmp_path):
    path = tmp_path / "image.lbm"
    path.write_bytes(_pbm_bytes())
    img = load_image(path)
    assert (img.width, img.height) == (2, 1)
    assert bytes(img.pixels) == bytes([1, 0])
    assert img.palette[1] == Color(40, 50, 60)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "absent.lbm")