"""Torus knot: a tube swept along a (p, q) knot curve, with Y as the up axis."""

from __future__ import annotations

import math

import numpy as np

from .round import _grid_indices, _interleave, _normalize, _palette, _require_count
from .shape import Shape

_KNOT_PALETTES = {
    1: ((0.8, 0.9, 1.0), (0.6, 0.8, 0.95)),
    2: ((1.0, 0.85, 0.7), (0.9, 0.7, 0.5)),
    3: ((0.9, 0.9, 0.6), (0.7, 0.8, 0.3)),
    4: ((0.85, 0.75, 0.85), (0.65, 0.5, 0.85)),
}
"""Knot palettes as (start colour, end colour) along the curve."""


class TorusKnot(Shape):
    """A tube of radius ``tube`` following a (p, q) torus knot of main radius ``radius``."""

    def __init__(self, p: int = 2, q: int = 3, radius: float = 1.0, tube: float = 0.2,
                 segments: int = 200, sides: int = 16, pattern: int = 1) -> None:
        super().__init__()
        segments = _require_count(segments, "segments")
        sides = _require_count(sides, "sides")
        p, q = int(p), int(q)
        base_color, top_color = _palette(_KNOT_PALETTES, pattern)

        rows = np.arange(segments + 1)
        t = rows / segments
        phi = t * 2.0 * math.pi
        cos_q, sin_q = np.cos(q * phi), np.sin(q * phi)
        cos_p, sin_p = np.cos(p * phi), np.sin(p * phi)

        ring = radius + cos_q
        center = np.stack([ring * cos_p, sin_q * radius, -ring * sin_p], axis=-1)

        dx = -(p * ring * sin_p) - q * sin_q * cos_p
        dy = p * ring * cos_p - q * sin_q * sin_p
        dz = q * cos_q
        tangent = _normalize(np.stack([dx, dz * radius, -dy], axis=-1))

        up = np.array([0.0, 1.0, 0.0])
        side_axis = _normalize(np.cross(up, tangent))
        binormal = _normalize(np.cross(tangent, side_axis))

        cols = np.arange(sides + 1)
        s = cols / sides
        angle = s * 2.0 * math.pi
        offset_n = (np.cos(angle) * tube)[None, :, None]
        offset_b = (np.sin(angle) * tube)[None, :, None]

        pos = center[:, None, :] + side_axis[:, None, :] * offset_n \
            + binormal[:, None, :] * offset_b
        normal = _normalize(pos - center[:, None, :])

        global_t = (rows[:, None] + s[None, :]) / segments
        color = base_color * (1.0 - global_t)[..., None] + top_color * global_t[..., None]
        uv = np.stack(np.broadcast_arrays(s[None, :], t[:, None]), axis=-1)

        self.p = p
        self.q = q
        self.radius = float(radius)
        self.tube = float(tube)
        self._set_geometry(_interleave(pos, color, normal, uv),
                           _grid_indices(segments, sides))