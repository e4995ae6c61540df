"""Water ripple simulation state: raindrops, mouse splashes and ping-pong buffers.

The wave propagation itself runs on the GPU. This module keeps the state that
drives it: which ripple textures are the source and destination this frame,
how large they are, and where new drops land.
"""

from __future__ import annotations

import random
from typing import Optional

BLOBTEX_SIZE = 64
TEX_SIZE_DIV = 2
PLONK_SIZE = 0.01
TEX_AUX = 2

DEFAULT_RAIN_RATE = 0.0

Point = tuple[float, float]


def blob_texture(size: int = BLOBTEX_SIZE) -> bytes:
    """Luminance texture of a soft round blob used to stamp waves onto the grid.

    The result holds ``size * size`` bytes, row by row. The value falls off
    with the inverse of the squared distance from the centre and reaches 0 at
    the inscribed circle.
    """
    if size <= 0:
        raise ValueError(f"blob size must be positive, got {size}")

    out = bytearray(size * size)
    for i in range(size):
        v = i / size * 2.0 - 1.0
        for j in range(size):
            u = j / size * 2.0 - 1.0
            dsq = u * u + v * v
            fade = 1.0 - min(dsq, 1.0)
            val = 1.0 if dsq == 0.0 else 0.05 * fade / dsq
            out[i * size + j] = min(int(val * 255.0), 255)
    return bytes(out)


class RippleState:
    """Frame-to-frame state of the ripple effect."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        rain_rate: float = DEFAULT_RAIN_RATE,
        time_msec: int = 0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rain_rate = rain_rate
        self.pending_drops = 0.0
        self.prev_upd = time_msec
        self.frame = 0
        self.mouse: Point = (0.0, 0.0)
        self.prev_mouse: Point = (0.0, 0.0)
        self._rng = rng or random.Random()
        self.width = 0
        self.height = 0
        self.aspect = 1.0
        self.resize(width, height)

    def resize(self, width: int, height: int) -> bool:
        """Adopt a new root window size; return False if it did not change."""
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid ripple area size: {width}x{height}")
        if width == self.width and height == self.height:
            return False
        self.width = width
        self.height = height
        self.aspect = width / height
        return True

    @property
    def texture_size(self) -> tuple[int, int]:
        """Size of the ripple textures, a fraction of the root window."""
        return self.width // TEX_SIZE_DIV, self.height // TEX_SIZE_DIV

    @property
    def blur_delta(self) -> tuple[float, float]:
        """Texel step handed to the wave shader."""
        return TEX_SIZE_DIV / self.width, TEX_SIZE_DIV / self.height

    @property
    def src_texture(self) -> int:
        """Index of the ripple texture read this frame."""
        return self.frame & 1

    @property
    def dest_texture(self) -> int:
        """Index of the ripple texture written this frame."""
        return (self.frame ^ 1) & 1

    def plonk_quad(self, u: float, v: float) -> tuple[tuple[float, float, float, float], ...]:
        """Corners ``(s, t, x, y)`` of the blob quad stamped at ``(u, v)``."""
        dy = PLONK_SIZE * self.aspect
        return (
            (0.0, 0.0, u - PLONK_SIZE, v + dy),
            (1.0, 0.0, u + PLONK_SIZE, v + dy),
            (1.0, 1.0, u + PLONK_SIZE, v - dy),
            (0.0, 1.0, u - PLONK_SIZE, v - dy),
        )

    def update(self, time_msec: int, mouse_pos: tuple[int, int]) -> list[Point]:
        """Advance to ``time_msec`` with the mouse at pixel ``mouse_pos``.

        Returns the positions, in [-1, 1], where drops land this frame: any
        raindrops that fell due, then the mouse position if it moved. The
        ping-pong buffers are swapped.
        """
        dt = (time_msec - self.prev_upd) / 1000.0
        self.prev_upd = time_msec
        self.pending_drops += self.rain_rate * dt

        mx, my = mouse_pos
        self.prev_mouse = self.mouse
        self.mouse = (mx / self.width * 2.0 - 1.0, my / self.height * 2.0 - 1.0)
        moved = self.mouse != self.prev_mouse

        drops: list[Point] = []
        while self.pending_drops >= 1.0:
            drops.append(
                (self._rng.random() * 2.0 - 1.0, self._rng.random() * 2.0 - 1.0)
            )
            self.pending_drops -= 1.0
        if moved:
            drops.append(self.mouse)

        self.frame += 1
        return drops