"""Video wallpaper helpers: texture sizing, TV static and a decoded-frame ring."""

from __future__ import annotations

import random
import threading
from typing import Any, Optional

NUM_BUF_FRAMES = 16
STATIC_SZ = 128
STATIC_SCALE = 6


def next_pow2(x: int) -> int:
    """Smallest power of two not below ``x``, in 32-bit unsigned arithmetic."""
    x = (x - 1) & 0xFFFFFFFF
    x |= x >> 1
    x |= x >> 2
    x |= x >> 4
    x |= x >> 8
    x |= x >> 16
    return (x + 1) & 0xFFFFFFFF


def static_frame(size: int = STATIC_SZ, rng: Optional[random.Random] = None) -> bytes:
    """A ``size`` x ``size`` luminance frame of noise with dimmed scanline pairs."""
    if size < 0:
        raise ValueError(f"static frame size must not be negative, got {size}")
    rng = rng or random.Random()
    out = bytearray()
    for i in range(size):
        row = bytes(rng.getrandbits(8) for _ in range(size))
        if i & 2:
            row = bytes(r >> 2 for r in row)
        out += row
    return bytes(out)


class FrameRing:
    """Bounded ring of decoded frames shared by a decoder thread and the renderer.

    One slot is always kept free, so the ring holds at most ``slots - 1``
    frames. The producer blocks in :meth:`put` while the ring is full; the
    consumer pops frames in :meth:`take` at the video's frame rate.
    """

    def __init__(self, slots: int = NUM_BUF_FRAMES) -> None:
        if slots < 2:
            raise ValueError(f"frame ring needs at least 2 slots, got {slots}")
        self._slots: list[Any] = [None] * slots
        self._in = 0
        self._out = 0
        self._cond = threading.Condition()
        self._closed = False
        self.interval = 0

    def _next(self, idx: int) -> int:
        return (idx + 1) % len(self._slots)

    def __len__(self) -> int:
        with self._cond:
            return (self._in - self._out) % len(self._slots)

    @property
    def closed(self) -> bool:
        """Whether the ring has been shut down."""
        return self._closed

    def close(self) -> None:
        """Stop the ring and wake a producer blocked in :meth:`put`."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def put(self, frame: Any) -> bool:
        """Queue ``frame``, waiting for room; return False once the ring is closed."""
        with self._cond:
            while not self._closed and self._next(self._in) == self._out:
                self._cond.wait()
            if self._closed:
                return False
            self._slots[self._in] = frame
            self._in = self._next(self._in)
            return True

    def take(self, dt_msec: int, interval_usec: int) -> Optional[Any]:
        """Advance playback by ``dt_msec`` and return the frame now due, if any.

        Frames are spaced ``interval_usec`` microseconds apart; when several
        became due, all are consumed and the latest one is returned.
        """
        if interval_usec <= 0:
            raise ValueError(f"frame interval must be positive, got {interval_usec}")
        self.interval += dt_msec * 1000
        frame = None
        with self._cond:
            while self.interval >= interval_usec and self._in != self._out:
                frame = self._slots[self._out]
                self._slots[self._out] = None
                self._out = self._next(self._out)
                self.interval -= interval_usec
            if frame is not None:
                self._cond.notify_all()
        return frame