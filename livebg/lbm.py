"""Reader for IFF ILBM and PBM (LBM) palette images with CRNG cycling ranges."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .image import PALETTE_SIZE, Color, ColorRange, CycleMode, Image

_CONTAINERS = frozenset({b"FORM", b"CAT ", b"LIST"})
_ILBM = b"ILBM"
_PBM = b"PBM "
_IMAGE_TYPES = frozenset({_ILBM, _PBM})

_MASK_PLANE = 1
_CRNG_REVERSE = 2

_BMHD_FORMAT = ">HHhhBBBBHBBhh"
_CRNG_FORMAT = ">HHHBB"


class LbmError(ValueError):
    """Raised when an LBM file is malformed or unsupported."""


@dataclass
class BitmapHeader:
    """Contents of a BMHD chunk."""

    width: int
    height: int
    xoffs: int
    yoffs: int
    nplanes: int
    masking: int
    compression: int
    padding: int
    colorkey: int
    aspect_num: int
    aspect_denom: int
    pgwidth: int
    pgheight: int


_BMHD_SIZE = struct.calcsize(_BMHD_FORMAT)
_CRNG_SIZE = struct.calcsize(_CRNG_FORMAT)


def _read_exact(fp: BinaryIO, n: int, what: str) -> bytes:
    data = fp.read(n)
    if len(data) < n:
        raise LbmError(f"unexpected end of file while reading {what}")
    return data


def _read_header(fp: BinaryIO) -> tuple[bytes, int] | None:
    data = fp.read(8)
    if len(data) < 8:
        return None
    return data[:4], struct.unpack(">I", data[4:])[0]


def file_is_lbm(fp: BinaryIO) -> bool:
    """Tell whether the stream holds an ILBM or PBM form; rewinds the stream."""
    try:
        while (hdr := _read_header(fp)) is not None:
            cid, size = hdr
            if cid in _CONTAINERS:
                kind = fp.read(4)
                if len(kind) < 4:
                    break
                if kind in _IMAGE_TYPES:
                    return True
                size -= 4
            fp.seek(max(size, 0), io.SEEK_CUR)
        return False
    finally:
        fp.seek(0)


def load_image_lbm(fp: BinaryIO) -> Image:
    """Load the first ILBM or PBM image found in the stream."""
    while (hdr := _read_header(fp)) is not None:
        cid, size = hdr
        if cid in _CONTAINERS:
            kind = fp.read(4)
            if len(kind) < 4:
                break
            size -= 4
            if kind in _IMAGE_TYPES:
                return _read_ilbm_pbm(fp, kind, size)
        fp.seek(max(size, 0), io.SEEK_CUR)
    raise LbmError("no ILBM or PBM image found")


def _read_ilbm_pbm(fp: BinaryIO, kind: bytes, size: int) -> Image:
    start = fp.tell()
    img = Image(bpp=0)
    bmhd: BitmapHeader | None = None
    have_body = False

    while (hdr := _read_header(fp)) is not None and fp.tell() - start < size:
        cid, csize = hdr

        if cid == b"BMHD":
            if csize != _BMHD_SIZE:
                raise LbmError(f"bitmap header chunk has size {csize}, expected {_BMHD_SIZE}")
            bmhd = BitmapHeader(
                *struct.unpack(_BMHD_FORMAT, _read_exact(fp, csize, "bitmap header"))
            )
            img.width, img.height, img.bpp = bmhd.width, bmhd.height, bmhd.nplanes
            if bmhd.nplanes > 8:
                raise LbmError(
                    f"{bmhd.nplanes} planes found, only paletized LBM files supported"
                )
            img.pixels = bytearray(img.width * img.height)

        elif cid == b"CMAP":
            count = csize // 3
            if count > PALETTE_SIZE:
                raise LbmError(f"colormap has {count} entries, at most 256 allowed")
            data = _read_exact(fp, csize, "colormap")
            img.palette[:count] = [
                Color(*data[i:i + 3]) for i in range(0, count * 3, 3)
            ]

        elif cid == b"CRNG":
            if csize != _CRNG_SIZE:
                raise LbmError(f"color range chunk has size {csize}, expected {_CRNG_SIZE}")
            _, rate, flags, low, high = struct.unpack(
                _CRNG_FORMAT, _read_exact(fp, csize, "color cycling range chunk")
            )
            if low != high and rate > 0:
                mode = CycleMode.REVERSE if flags & _CRNG_REVERSE else CycleMode.NORMAL
                img.ranges.insert(0, ColorRange(low=low, high=high, cmode=mode, rate=rate))

        elif cid == b"BODY":
            if bmhd is None:
                raise LbmError("malformed ILBM image: encountered BODY chunk before BMHD")
            if kind == _ILBM:
                _read_body_ilbm(fp, bmhd, img)
            else:
                _read_body_pbm(fp, bmhd, img)
            have_body = True

        else:
            fp.seek(csize, io.SEEK_CUR)
            if fp.tell() & 1:
                # chunks must start at even offsets
                fp.seek(1, io.SEEK_CUR)

    if not have_body:
        raise LbmError("no BODY chunk found")
    return img


def _read_body_ilbm(fp: BinaryIO, bmhd: BitmapHeader, img: Image) -> None:
    width = img.width
    rowsz = width // 8
    needed = (width + 7) // 8

    for y in range(img.height):
        line = bytearray(width)
        for plane in range(bmhd.nplanes):
            if bmhd.compression:
                row = _read_compressed_scanline(fp, rowsz)
            else:
                row = _read_exact(fp, rowsz, "interleaved pixel data")
            row = row.ljust(needed, b"\0")
            for x in range(width):
                line[x] |= ((row[x >> 3] >> (7 - (x & 7))) & 1) << plane

        if bmhd.masking & _MASK_PLANE:
            fp.seek(rowsz, io.SEEK_CUR)

        img.pixels[y * width:(y + 1) * width] = line


def _read_body_pbm(fp: BinaryIO, bmhd: BitmapHeader, img: Image) -> None:
    width = img.width
    if bmhd.compression:
        for y in range(img.height):
            img.pixels[y * width:(y + 1) * width] = _read_compressed_scanline(fp, width)
    else:
        img.pixels[:] = _read_exact(fp, width * img.height, "linear pixel data")


def _read_compressed_scanline(fp: BinaryIO, width: int) -> bytes:
    out = bytearray()
    while len(out) < width:
        ctl = struct.unpack("b", _read_exact(fp, 1, "compressed scanline"))[0]
        if ctl == -128:
            continue
        if ctl >= 0:
            out += _read_exact(fp, ctl + 1, "compressed scanline")
        else:
            out += _read_exact(fp, 1, "compressed scanline") * (1 - ctl)
    return bytes(out[:width])