"""Colour cycling playback: palette animation and slideshows with fades."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .canvas import load_image
from .image import PALETTE_SIZE, Color, CycleMode, Image, gen_test_image

PathLike = Union[str, "os.PathLike[str]"]
Loader = Callable[[str], Image]

_RATE_DIVISOR = 280000
_DEFAULT_FB_WIDTH = 640
_DEFAULT_FB_HEIGHT = 480


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _trunc_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def cycle_offset(mode: int, rate: int, rsize: int, msec: int) -> int:
    """Offset into a cycling range at ``msec``, in 24.8 fixed point."""
    if rsize <= 0:
        raise ValueError(f"range size must be positive, got {rsize}")

    scaled_rate = (rate << 8) & 0xFFFFFFFF
    tm = _to_int32((scaled_rate * (msec & 0x3FFFFFFF)) // _RATE_DIVISOR)

    if mode == CycleMode.PINGPONG:
        span = rsize << 8
        offs = _trunc_mod(tm, span * 2)
        if offs > span:
            offs = span * 2 - offs
        return offs

    if mode in (CycleMode.SINE, CycleMode.SINE_HALF):
        t = tm / 256.0
        x = math.fmod(t, float(rsize * 2))
        foffs = math.sin((x * math.pi * 2.0) / rsize) + 1.0
        foffs *= rsize / (4.0 if mode == CycleMode.SINE_HALF else 2.0)
        return int(foffs * 256.0)

    return tm


@dataclass
class _Slide:
    path: Optional[str]
    image: Optional[Image] = None


@dataclass
class Slideshow:
    """A circular list of image files, loaded lazily and cached."""

    paths: list[str]
    loader: Loader = load_image
    _slides: list[_Slide] = field(init=False, repr=False)
    _cursor: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        if not self.paths:
            raise ValueError("slideshow has no entries")
        self._slides = [_Slide(str(p)) for p in self.paths]

    def next_image(self) -> Image:
        """Return the next loadable image, dropping entries that fail to load."""
        count = len(self._slides)
        for _ in range(count):
            slide = self._slides[self._cursor]
            self._cursor = (self._cursor + 1) % count
            if slide.path is None:
                continue
            if slide.image is None:
                try:
                    slide.image = self.loader(slide.path)
                except (OSError, ValueError):
                    slide.path = None
                    continue
            return slide.image
        raise ValueError("no loadable image in slideshow")

    def _skip(self) -> None:
        self._cursor = (self._cursor + 1) % len(self._slides)


def load_slideshow(path: PathLike) -> Slideshow:
    """Build a slideshow from every entry of a directory."""
    names = sorted(os.listdir(path))
    if not names:
        raise ValueError(f"no files in slideshow directory: {os.fspath(path)}")
    return Slideshow([os.path.join(os.fspath(path), name) for name in names])


def _lerp_fixed(a: int, b: int, xt: int) -> int:
    return ((a << 8) + (b - a) * xt) >> 8


class ColorCycler:
    """Animates an indexed image's palette and fades between slideshow images.

    The output is an 8-bit framebuffer (``pixels``, ``width``, ``height``) and a
    256-entry ``palette``; ``palette_dirty`` and ``frame_dirty`` tell a renderer
    what changed since it last cleared them.
    """

    def __init__(
        self,
        path: Optional[PathLike] = None,
        *,
        blend: bool = True,
        fade_dur: int = 600,
        show_time: int = 15000,
        loader: Loader = load_image,
    ) -> None:
        self.blend = blend
        self.fade_dur = fade_dur
        self.show_time = show_time
        self.change_pending = False

        self.width = _DEFAULT_FB_WIDTH
        self.height = _DEFAULT_FB_HEIGHT
        self.pixels = bytearray(self.width * self.height)
        self.palette: list[Color] = [Color() for _ in range(PALETTE_SIZE)]
        self.upd_interval = 0
        self.palette_dirty = True
        self.frame_dirty = True

        self._fade_dir = 0
        self._fade_start = 0
        self._showing_since = 0

        self.slideshow: Optional[Slideshow] = None
        self.image: Optional[Image]
        if path is None:
            self.image = gen_test_image()
        elif os.path.isdir(os.stat(path) and path):
            show = load_slideshow(path)
            show.loader = loader
            self.slideshow = show
            self.image = show.next_image()
        else:
            self.image = loader(os.fspath(path))

        self._set_image_palette(self.image)
        self.show_image(self.image, 0)

    def _set_palette(self, idx: int, r: int, g: int, b: int) -> None:
        self.palette[idx] = Color(r & 0xFF, g & 0xFF, b & 0xFF)
        self.palette_dirty = True

    def _set_image_palette(self, image: Image) -> None:
        for i, col in enumerate(image.palette[:PALETTE_SIZE]):
            self._set_palette(i, col.r, col.g, col.b)

    def _palfade(self, direction: int, tx: int) -> None:
        """Scale the image palette by ``tx``/1024 (reversed when fading out)."""
        if self.image is None:
            return
        if direction == -1:
            tx = 1024 - tx
        for i, col in enumerate(self.image.palette[:PALETTE_SIZE]):
            self._set_palette(i, (col.r * tx) >> 10, (col.g * tx) >> 10, (col.b * tx) >> 10)

    def _resize(self, width: int, height: int) -> None:
        if width == self.width and height == self.height:
            return
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def show_image(self, image: Image, time_msec: int) -> None:
        """Put ``image`` into the framebuffer and adopt its update interval."""
        self._resize(image.width, image.height)
        self.pixels[:] = bytes(image.pixels[: self.width * self.height]).ljust(
            self.width * self.height, b"\0"
        )
        self.frame_dirty = True
        self._showing_since = time_msec

        max_rate = max((rng.rate for rng in image.ranges), default=0)
        self.upd_interval = max(max_rate, 0) * 10

    def draw(self, time_msec: int) -> None:
        """Advance the animation to ``time_msec``."""
        if self.image is None:
            return

        if self.slideshow is not None and self._draw_slideshow(time_msec):
            return

        image = self.image
        src = image.palette
        for rng in image.ranges:
            if not rng.rate:
                continue
            rsize = rng.high - rng.low + 1
            if rsize <= 0 or rng.low < 0 or rng.high >= PALETTE_SIZE:
                continue

            offs = cycle_offset(rng.cmode, rng.rate, rsize, time_msec)
            ioffs = _trunc_mod(offs >> 8, rsize)
            rev = rng.cmode == CycleMode.REVERSE
            frac = offs & 0xFF

            for j in range(rsize):
                if rev:
                    to = (j + ioffs) % rsize
                    nxt = (to + 1) % rsize
                else:
                    to = (j - ioffs) % rsize
                    nxt = (to - 1) % rsize
                a = src[to + rng.low]
                pidx = j + rng.low
                if self.blend:
                    b = src[nxt + rng.low]
                    self._set_palette(
                        pidx,
                        _lerp_fixed(a.r, b.r, frac),
                        _lerp_fixed(a.g, b.g, frac),
                        _lerp_fixed(a.b, b.b, frac),
                    )
                else:
                    self._set_palette(pidx, a.r, a.g, a.b)

    def _draw_slideshow(self, time_msec: int) -> bool:
        """Handle slide switching; return True while a fade is in progress."""
        assert self.slideshow is not None
        if not self._fade_dir and (
            self.change_pending or time_msec - self._showing_since > self.show_time
        ):
            self._fade_dir = -1
            self._fade_start = time_msec
            self.change_pending = False

        if not self._fade_dir:
            return False

        dt = time_msec - self._fade_start
        if dt < 0 or dt >= self.fade_dur:
            if self._fade_dir == -1:
                self.slideshow._skip()
                try:
                    self.image = self.slideshow.next_image()
                except ValueError:
                    self.image = None
                    return True
                self.show_image(self.image, time_msec)
                self._fade_dir = 1
                self._fade_start = time_msec
                dt = 0
            else:
                self._set_image_palette(self.image)
                self._fade_dir = 0

        if self._fade_dir:
            self._palfade(self._fade_dir, (dt << 10) // self.fade_dur)
        self._showing_since = time_msec
        return True