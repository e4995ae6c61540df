"""Flowing wave surface in the style of a console menu background.

The surface is a flat grid of vertices displaced in a shader. This module
builds the grid and works out the shader uniforms from the user settings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = [
    "GRID_WIDTH",
    "GRID_LENGTH",
    "WaveSettings",
    "perspective",
    "wave_grid",
]

GRID_WIDTH = 1250
GRID_LENGTH = 500

CHAOS_DEFAULT = 1.36
DETAIL_DEFAULT = 2.2
SPEED_DEFAULT = 0.9
SCALE_DEFAULT = 0.39
WAVE_COLOR_DEFAULT = (0.2, 0.5372549, 0.7529411)
LIGHT_ANGLE_DEFAULT = 140.0
SECONDARY_CHAOS_DEFAULT = 1.17
SECONDARY_DETAIL_DEFAULT = 0.9
SECONDARY_SPEED_DEFAULT = 1.3
SECONDARY_SCALE_DEFAULT = 0.84

_GRID_SPAN_X = 2.1
_DEG_TO_RAD = 0.0174532925

Vec3 = tuple[float, float, float]
QuadIndices = tuple[int, int, int, int]


def perspective(vfov: float, aspect: float, znear: float, zfar: float) -> list[float]:
    """Column-major 4x4 perspective projection matrix as 16 floats."""
    s = 1.0 / math.tan(vfov / 2.0)
    depth = znear - zfar
    m = [0.0] * 16
    m[0] = s / aspect
    m[5] = s
    m[10] = (znear + zfar) / depth
    m[14] = 2.0 * znear * zfar / depth
    m[11] = -1.0
    return m


def _check_grid(w: int, l: int) -> None:
    if w < 1 or l < 1:
        raise ValueError(f"wave grid must be at least 1x1, got {w}x{l}")


def wave_grid(w: int = GRID_WIDTH, l: int = GRID_LENGTH) -> tuple[list[Vec3], list[QuadIndices]]:
    """Build the flat ``w`` x ``l`` vertex grid and its quad indices.

    Vertex ``x + z * w`` lies at ``(x', 0, z')`` with ``x'`` spanning about
    [-1.05, 1.05) and ``z'`` spanning [-0.5, 0.5). Quads are listed column
    by column, ``(w - 1) * (l - 1)`` of them.
    """
    _check_grid(w, l)
    vertices: list[Vec3] = [
        (((x / w) - 0.5) * _GRID_SPAN_X, 0.0, (z / l) - 0.5)
        for z in range(l)
        for x in range(w)
    ]
    quads: list[QuadIndices] = [
        (x + z * w, x + (z + 1) * w, (x + 1) + (z + 1) * w, (x + 1) + z * w)
        for x in range(w - 1)
        for z in range(l - 1)
    ]
    return vertices, quads


@dataclass
class WaveSettings:
    """User-facing wave parameters."""

    light_angle: float = LIGHT_ANGLE_DEFAULT
    chaos: float = CHAOS_DEFAULT
    detail: float = DETAIL_DEFAULT
    speed: float = SPEED_DEFAULT
    scale: float = SCALE_DEFAULT
    wave_color: tuple[float, float, float] = WAVE_COLOR_DEFAULT

    def uniforms(
        self, tmsec: int, w: int = GRID_WIDTH, l: int = GRID_LENGTH
    ) -> dict[str, object]:
        """Shader uniform values for time ``tmsec`` (ms) on a ``w`` x ``l`` grid."""
        _check_grid(w, l)
        tsec = tmsec / 1000.0
        return {
            "x_inc": (1.0 / w) * _GRID_SPAN_X,
            "z_inc": 1.0 / l,
            "time": tsec * 0.1 + 50.0,
            "chaos": self.chaos * 0.3,
            "detail": self.detail * 0.1,
            "speed": self.speed * 0.1,
            "scale": self.scale * 50.0,
            "sec_chaos": SECONDARY_CHAOS_DEFAULT * 0.3,
            "sec_detail": SECONDARY_DETAIL_DEFAULT * 0.1,
            "sec_speed": SECONDARY_SPEED_DEFAULT * 0.1,
            "sec_scale": SECONDARY_SCALE_DEFAULT * 50.0,
            "light_a": self.light_angle * _DEG_TO_RAD,
            "wave_color": tuple(self.wave_color[:3]),
        }