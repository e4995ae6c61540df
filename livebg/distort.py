"""Wavy distortion mesh for a background image.

The image quad is cut into a grid. Each vertex's texture coordinate is pushed
along by a cosine wave that fades out towards the edges of the image, and can
be scaled further by an animation mask.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol, Sequence

USUB = 45
VSUB = 20

DEFAULT_AMPLITUDE = 0.025
DEFAULT_FREQUENCY = 8.0

Vertex = tuple[float, float, float, float]
Quad = tuple[Vertex, Vertex, Vertex, Vertex]


class _Mask(Protocol):
    width: int
    height: int
    pixels: Sequence[int]


def wave(x: float, frq: float, amp: float, t: float) -> float:
    """Displacement of a cosine wave at ``x`` and time ``t`` (seconds)."""
    t *= 0.5
    return math.cos(x * frq + t) * amp


def dmask(x: float) -> float:
    """Edge falloff: 0 at the borders of [0, 1], 1 over most of the inside."""
    s = math.sin(x * math.pi) * 20.0
    return 1.0 if s > 1.0 else s


def _texcoord(
    u: float, v: float, au: float, av: float, mask: Optional[_Mask]
) -> tuple[float, float]:
    if mask is not None:
        w, h = mask.width, mask.height
        tx = min(max(int(u * w), 0), w - 1)
        ty = min(max(h - int(v * h), 0), h - 1)
        s = (mask.pixels[ty * w + tx] & 0xFF) / 255.0
        au *= s
        av *= s
    return u + au, 1.0 - (v + av)


def distortion_mesh(
    t: float, freq: float, ampl: float, mask: Optional[_Mask] = None
) -> list[Quad]:
    """Build the distorted grid at time ``t`` (seconds).

    Returns ``USUB * VSUB`` quads, row by row from the bottom, each made of
    four ``(x, y, s, t)`` vertices: position in [-1, 1] and texture coordinate.
    ``mask``, when given, is any object with ``width``, ``height`` and
    row-major ``pixels``; the low byte of each pixel scales the displacement.
    """
    du = 1.0 / USUB
    dv = 1.0 / VSUB
    dx = du * 2.0
    dy = dv * 2.0

    quads: list[Quad] = []
    for i in range(VSUB):
        v0 = i * dv
        v1 = v0 + dv
        y = v0 * 2.0 - 1.0
        av0 = wave(v0, freq * 2.0, dmask(v0) * ampl * 0.75, t)
        av1 = wave(v1, freq * 2.0, dmask(v1) * ampl * 0.75, t)

        for j in range(USUB):
            u0 = j * du
            u1 = u0 + du
            x = u0 * 2.0 - 1.0
            au0 = wave(u0, freq, dmask(u0) * ampl, t)
            au1 = wave(u1, freq, dmask(u1) * ampl, t)

            corners = (
                (x, y, u0, v0, au0, av0),
                (x + dx, y, u1, v0, au1, av0),
                (x + dx, y + dy, u1, v1, au1, av1),
                (x, y + dy, u0, v1, au0, av1),
            )
            quads.append(
                tuple(
                    (vx, vy, *_texcoord(u, v, au, av, mask))
                    for vx, vy, u, v, au, av in corners
                )
            )
    return quads