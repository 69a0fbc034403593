"""Shapes of revolution built from a profile: capsule and bottle."""

from __future__ import annotations

import math

import numpy as np

from .round import _grid_indices, _interleave, _normalize, _palette, _require_count
from .shape import Shape

_CAPSULE_PALETTES = {
    1: ((1.00, 0.78, 0.55), (1.00, 0.88, 0.70)),
    2: ((0.85, 0.70, 0.55), (0.95, 0.85, 0.75)),
    3: ((0.55, 0.40, 0.65), (0.75, 0.60, 0.85)),
    4: ((0.45, 0.60, 0.75), (0.65, 0.80, 0.90)),
}
"""Capsule palettes as (bottom colour, top colour)."""

_BOTTLE_PALETTES = {
    1: ((1.0, 0.85, 0.7), (0.9, 0.7, 0.5)),
    2: ((0.8, 0.9, 1.0), (0.6, 0.8, 0.95)),
    3: ((0.9, 0.9, 0.6), (0.7, 0.8, 0.3)),
    4: ((0.85, 0.75, 0.85), (0.65, 0.5, 0.85)),
}
"""Bottle palettes as (base colour, top colour)."""

BOTTLE_PROFILE = (
    (0.50, 0.00), (0.48, 0.05), (0.45, 0.15), (0.40, 0.40),
    (0.35, 0.80), (0.38, 1.20), (0.45, 1.60), (0.50, 2.00),
)
"""Bottle outline as (radius, height) pairs from base to mouth."""


class Capsule(Shape):
    """Cylinder along Y capped by two hemispheres, centred on the origin."""

    def __init__(self, radius: float = 0.5, height: float = 1.0, sectors: int = 36,
                 stacks: int = 18, pattern: int = 1) -> None:
        super().__init__()
        sectors = _require_count(sectors, "sectors")
        stacks = _require_count(stacks, "stacks")
        bottom, top = _palette(_CAPSULE_PALETTES, pattern)
        half = height * 0.5
        steps = np.arange(stacks + 1)
        quarter = math.pi / 2.0 / stacks

        lower = self._rows(radius, height, sectors, bottom, top,
                           phi=-math.pi / 2.0 + steps * quarter,
                           center_y=np.full(stacks + 1, -half),
                           tex_v=steps / stacks * 0.5)
        cylinder = self._rows(radius, height, sectors, bottom, top,
                              phi=np.zeros(2),
                              center_y=np.array([-half, half]),
                              tex_v=np.array([0.5, 1.0]))
        upper = self._rows(radius, height, sectors, bottom, top,
                           phi=steps * quarter,
                           center_y=np.full(stacks + 1, half),
                           tex_v=1.0 + steps / stacks * 0.5)

        hemi_verts = (stacks + 1) * (sectors + 1)
        ring_verts = sectors + 1
        indices = np.concatenate([
            _grid_indices(stacks, sectors, 0),
            _grid_indices(1, sectors, hemi_verts),
            _grid_indices(stacks, sectors, hemi_verts + 2 * ring_verts),
        ])
        self._set_geometry(np.concatenate([lower, cylinder, upper]), indices)

    @staticmethod
    def _rows(radius, height, sectors, bottom, top, phi, center_y, tex_v) -> np.ndarray:
        """Rings of latitude ``phi`` around the given centre heights."""
        sin_p, cos_p = np.sin(phi)[:, None], np.cos(phi)[:, None]
        theta = np.arange(sectors + 1) * (2.0 * math.pi / sectors)
        cos_t, sin_t = np.cos(theta)[None, :], np.sin(theta)[None, :]

        y = center_y[:, None] + radius * sin_p
        t = (y[:, 0] + (height * 0.5 + radius)) / (height + 2.0 * radius)
        color = (bottom * (1.0 - t)[:, None] + top * t[:, None])[:, None, :]

        pos = np.stack(np.broadcast_arrays(radius * cos_p * cos_t, y,
                                           -radius * cos_p * sin_t), axis=-1)
        normal = _normalize(np.stack(np.broadcast_arrays(cos_p * cos_t, sin_p,
                                                         -cos_p * sin_t), axis=-1))
        uv = np.stack(np.broadcast_arrays((np.arange(sectors + 1) / sectors)[None, :],
                                          tex_v[:, None]), axis=-1)
        return _interleave(pos, color, normal, uv)


class Bottle(Shape):
    """Bottle turned around the Y axis from a fixed profile, with a closed base."""

    def __init__(self, radial_segs: int = 36, height_segs: int = 8,
                 pattern: int = 1) -> None:
        super().__init__()
        radial_segs = _require_count(radial_segs, "radial_segs")
        # height_segs is accepted for compatibility; the profile fixes the rows.
        self.height_segs = int(height_segs)
        base_color, top_color = _palette(_BOTTLE_PALETTES, pattern)

        profile = np.array(BOTTLE_PROFILE)
        radii, heights = profile[:, 0], profile[:, 1]
        rows = len(profile)

        u = np.arange(radial_segs + 1) / radial_segs
        theta = u * 2.0 * math.pi
        cos_t, sin_t = np.cos(theta), np.sin(theta)

        t = heights / heights[-1]
        color = (base_color * (1.0 - t)[:, None] + top_color * t[:, None])[:, None, :]
        pos = np.stack(np.broadcast_arrays(radii[:, None] * cos_t[None, :],
                                           heights[:, None],
                                           -radii[:, None] * sin_t[None, :]), axis=-1)
        side_normal = _normalize(np.stack([cos_t, np.zeros_like(cos_t), -sin_t], axis=-1))
        normal = np.broadcast_to(side_normal[None, :, :], pos.shape)
        uv = np.stack(np.broadcast_arrays(u[None, :], t[:, None]), axis=-1)
        side = _interleave(pos, color, normal, uv)

        down = np.array([0.0, -1.0, 0.0])
        center = np.concatenate([[0.0, 0.0, 0.0], base_color, down, [0.5, 0.5]])
        bottom_r = radii[0]
        ring_pos = np.stack([bottom_r * cos_t, np.zeros_like(cos_t), -bottom_r * sin_t],
                            axis=-1)
        ring_uv = np.stack([0.5 + 0.5 * cos_t, 0.5 + 0.5 * sin_t], axis=-1)
        ring = _interleave(ring_pos, base_color, down, ring_uv)

        center_idx = len(side)
        j = np.arange(radial_segs)
        fan = np.stack([np.full(radial_segs, center_idx), center_idx + 1 + j,
                        center_idx + 2 + j], axis=-1).reshape(-1)

        points = np.concatenate([side, center[None, :], ring])
        indices = np.concatenate([_grid_indices(rows - 1, radial_segs), fan])
        self._set_geometry(points, indices)