"""Starfield: stars streaming towards the viewer, optionally following the mouse."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence

DEF_STAR_COUNT = 3000
DEF_STAR_SPEED = 5.0
DEF_STAR_SIZE = 1.5
DEF_FOLLOW = 0.25
DEF_FOLLOW_SPEED = 0.6
DEF_STAR_COLOR = (1.0, 1.0, 1.0)

MAX_STAR_COUNT = 65536
STAR_DEPTH = 80

# (u, v, r, g, b, a, x, y, z): texture coordinate, 8-bit colour, position
Vertex = tuple[float, float, int, int, int, int, float, float, float]
Quad = tuple[Vertex, Vertex, Vertex, Vertex]


def perspective(vfov: float, aspect: float, znear: float, zfar: float) -> list[float]:
    """Column-major 4x4 perspective projection matrix."""
    s = 1.0 / math.tan(vfov / 2.0)
    depth = znear - zfar
    m = [0.0] * 16
    m[0] = s / aspect
    m[5] = s
    m[10] = (znear + zfar) / depth
    m[14] = 2.0 * znear * zfar / depth
    m[11] = -1.0
    return m


@dataclass(frozen=True)
class Star:
    """A star's starting position and its distance from the view axis."""

    x: float
    y: float
    z: float
    lenxy: float


def make_stars(count: int, rng: Optional[random.Random] = None) -> list[Star]:
    """Scatter ``count`` stars (at most ``MAX_STAR_COUNT``) through the volume."""
    if count < 0:
        raise ValueError(f"star count must not be negative, got {count}")
    rng = rng or random.Random()
    count = min(count, MAX_STAR_COUNT)
    width = STAR_DEPTH / 3.0

    stars = []
    for _ in range(count):
        x = width * (2.0 * rng.random() - 1.0)
        y = width * (2.0 * rng.random() - 1.0)
        z = STAR_DEPTH * rng.random()
        stars.append(Star(x, y, z, math.hypot(x, y)))
    return stars


def _color_byte(value: float) -> int:
    return min(max(int(value * 255.0), 0), 255)


class Starfield:
    """Star positions over time and the mouse-following camera direction."""

    def __init__(
        self,
        count: int = DEF_STAR_COUNT,
        *,
        speed: float = DEF_STAR_SPEED,
        size: float = DEF_STAR_SIZE,
        color: Sequence[float] = DEF_STAR_COLOR,
        follow: float = DEF_FOLLOW,
        follow_speed: float = DEF_FOLLOW_SPEED,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self.speed = speed
        self.size = size
        self.color = tuple(color[:3])
        self.follow_amount = follow
        self.follow_speed = follow_speed
        self.cam = (0.0, 0.0)
        self.target = (0.0, 0.0)
        self.stars: list[Star] = []
        self.count = count

    @property
    def count(self) -> int:
        """Number of stars; setting it scatters a new set."""
        return len(self.stars)

    @count.setter
    def count(self, value: int) -> None:
        self.stars = make_stars(value, self._rng)

    def quads(self, tmsec: int) -> tuple[list[Quad], list[Quad]]:
        """Streak and glow quads for every star at ``tmsec``.

        Each quad is four vertices laid out as ``(u, v, r, g, b, a, x, y, z)``;
        they are drawn as triangles (0, 1, 2) and (0, 2, 3).
        """
        tsec = tmsec / 1000.0
        ssize = self.size * 0.035
        sz = ssize * 4.0
        r, g, b = (_color_byte(c) for c in self.color)

        streaks: list[Quad] = []
        points: list[Quad] = []
        for star in self.stars:
            z = math.fmod(star.z + tsec * self.speed, STAR_DEPTH)
            alpha = _color_byte(z / STAR_DEPTH)
            pz = z - STAR_DEPTH
            col = (r, g, b, alpha)

            theta = math.atan2(star.y, star.x)
            sin_t, cos_t = math.sin(theta), math.cos(theta)
            x0 = ssize * sin_t + star.x
            y0 = -ssize * cos_t + star.y
            x1 = -ssize * sin_t + star.x
            y1 = ssize * cos_t + star.y
            back = pz - ssize * 16.0

            streaks.append((
                (0.0, 1.0, *col, x0, y0, pz),
                (1.0, 1.0, *col, x1, y1, pz),
                (1.0, 0.0, *col, x1, y1, back),
                (0.0, 0.0, *col, x0, y0, back),
            ))

            pzz = pz - ssize
            points.append((
                (0.0, 0.0, *col, star.x - sz, star.y - sz, pzz),
                (1.0, 0.0, *col, star.x + sz, star.y - sz, pzz),
                (1.0, 1.0, *col, star.x + sz, star.y + sz, pzz),
                (0.0, 1.0, *col, star.x - sz, star.y + sz, pzz),
            ))
        return streaks, points

    def follow(
        self,
        mouse_x: int,
        mouse_y: int,
        root_width: int,
        root_height: int,
        dtms: int,
    ) -> tuple[float, float]:
        """Ease the camera towards the mouse over ``dtms`` ms; return its direction."""
        if self.follow_amount > 0.0:
            t = self.follow_speed * (dtms / 1000.0)
            aspect = root_width / root_height
            tx = (mouse_x / root_width - 0.5) * self.follow_amount * aspect
            ty = (0.5 - mouse_y / root_height) * self.follow_amount
            self.target = (tx, ty)
            cx, cy = self.cam
            self.cam = (cx + (tx - cx) * t, cy + (ty - cy) * t)
        return self.cam