"""Palette-indexed images carrying colour cycling ranges."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

PALETTE_SIZE = 256


class CycleMode(IntEnum):
    """How a colour range moves through the palette."""

    NORMAL = 0
    UNUSED = 1
    REVERSE = 2
    PINGPONG = 3
    SINE_HALF = 4  # sine -> [0, range/2]
    SINE = 5  # sine -> [0, range]


@dataclass(frozen=True)
class Color:
    """An 8-bit RGB palette entry."""

    r: int = 0
    g: int = 0
    b: int = 0


@dataclass
class ColorRange:
    """A run of palette indices that cycles at a given rate."""

    low: int = 0
    high: int = 0
    cmode: int = CycleMode.NORMAL
    rate: int = 0

    @property
    def size(self) -> int:
        """Number of palette entries covered by the range."""
        return self.high - self.low + 1


def _black_palette() -> list[Color]:
    return [Color() for _ in range(PALETTE_SIZE)]


@dataclass
class Image:
    """An 8-bit indexed image with its palette and cycling ranges."""

    width: int = 0
    height: int = 0
    bpp: int = 8
    palette: list[Color] = field(default_factory=_black_palette)
    ranges: list[ColorRange] = field(default_factory=list)
    pixels: bytearray = field(default_factory=bytearray)


def gen_test_image() -> Image:
    """Build the 640x480 checkerboard test image with a full-palette cycle."""
    width, height = 640, 480

    palette = []
    for i in range(PALETTE_SIZE):
        theta = math.pi * 2.0 * i / 256.0
        r = math.cos(theta) * 0.5 + 0.5
        g = math.sin(theta) * 0.5 + 0.5
        b = -math.cos(theta) * 0.5 + 0.5
        palette.append(Color(int(r * 255.0), int(g * 255.0), int(b * 255.0)))

    pixels = bytearray(width * height)
    for y in range(height):
        c = (y << 8) // height
        ybit = (y >> 6) & 1
        row = bytes(
            (c if ybit == ((x >> 6) & 1) else c + 128) & 0xFF for x in range(width)
        )
        pixels[y * width:(y + 1) * width] = row

    return Image(
        width=width,
        height=height,
        bpp=8,
        palette=palette,
        ranges=[ColorRange(low=0, high=255, cmode=CycleMode.NORMAL, rate=5000)],
        pixels=pixels,
    )